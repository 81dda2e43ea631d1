"""Command-line entry point.

Usage::

    checkup case.yaml
    checkup case.yaml --working-directory /srv/app -vv
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Sequence

from .dsl import SuiteConfigError
from .executor import DEFAULT_SHELL
from .orchestrator import ExecutionOrchestrator
from .runner import RunConfig

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="checkup",
        description="Run the scenarios of a check suite and report a weighted score.",
    )
    parser.add_argument(
        "suite",
        nargs="?",
        type=Path,
        default=Path("case.yaml"),
        help="Suite definition file (default: case.yaml)",
    )
    parser.add_argument(
        "--working-directory",
        type=Path,
        default=None,
        help="Working directory for cases that do not set their own",
    )
    parser.add_argument(
        "-v",
        dest="verbosity",
        action="count",
        default=0,
        help="Verbosity: -v shows descriptions, -vv failed outputs, -vvv all outputs",
    )
    parser.add_argument(
        "--shell",
        default=DEFAULT_SHELL,
        help=f"Interpreter used to run case scripts (default: {DEFAULT_SHELL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-script timeout in seconds (default: none)",
    )
    parser.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Colour output (default: on when TERM is set)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log internal loading and execution tracing",
    )
    return parser


def build_config(args: argparse.Namespace) -> RunConfig:
    color = args.color if args.color is not None else bool(os.getenv("TERM"))
    return RunConfig(
        verbosity=min(args.verbosity, 3),
        workdir=args.working_directory,
        shell=args.shell,
        color=color,
        timeout=args.timeout,
    )


def configure_logging(debug: bool = False) -> None:
    """Send the report to stderr as bare lines; internal tracing only with ``--debug``."""

    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger("checkup").setLevel(level)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = build_config(args)
    configure_logging(args.debug)

    try:
        result = ExecutionOrchestrator(config).execute(args.suite)
    except SuiteConfigError as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR

    return EXIT_FAILED if result.score.failed else EXIT_OK
