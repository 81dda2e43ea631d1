"""Scoring and human-readable reporting for a finished suite run."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from .dsl.model import Scenario, ScenarioHandle, Suite
from .runner import SuiteRun

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 83

_GREEN = "\033[32m"
_RED = "\033[31m"
_RESET = "\033[0m"
_ANSI_RE = re.compile(r"\033[^m]*m")


@dataclass(slots=True)
class SuiteScore:
    total: int
    successful: int
    failed: int
    points: int
    max_points: int
    score: float | None
    duration: str

    @property
    def rating(self) -> str:
        if self.score is None:
            return "n/a"
        return f"{self.score:.2f}%"


def score_suite(suite: Suite, run: SuiteRun) -> SuiteScore:
    """Aggregate weighted results over displayable, non-skipped scenarios.

    ``score`` is ``None`` when no displayable scenario carries weight.
    """
    total = 0
    failed = 0
    points = 0
    max_points = 0
    for handle in suite.displayable_handles():
        scenario = suite[handle]
        total += 1
        max_points += scenario.weight or 0
        if scenario.is_successful:
            points += scenario.weight or 0
        else:
            failed += 1

    score = 100 * points / max_points if max_points else None
    return SuiteScore(
        total=total,
        successful=total - failed,
        failed=failed,
        points=points,
        max_points=max_points,
        score=score,
        duration=run.duration,
    )


class SuiteReporter:
    """Render header, per-scenario status lines and summary to a logger."""

    def __init__(
        self,
        *,
        verbosity: int = 0,
        color: bool = True,
        sink: logging.Logger | None = None,
    ) -> None:
        self._verbosity = verbosity
        self._color = color
        self._sink = sink or logger

    def header(self, suite: Suite) -> None:
        count = len(suite.displayable_handles())
        if count > 1:
            self._emit(f"[ {suite.name} ], 1..{count} tests")
        elif count == 1:
            self._emit(f"[ {suite.name} ], 1 test")
        else:
            self._emit(f"[ {suite.name} ], no tests to run")

    def separator(self) -> None:
        self._emit(SEPARATOR)

    def scenario(self, suite: Suite, handle: ScenarioHandle, sequence: int) -> None:
        scenario = suite[handle]
        if not scenario.displayable:
            return

        if scenario.is_successful:
            self._emit(
                f"{_GREEN}✓ {sequence:2d}  {scenario.label}, {scenario.duration}, "
                f"secret phrase: {scenario.secret_phrase or ''}{_RESET}"
            )
        else:
            self._emit(f"{_RED}✗ {sequence:2d}  {scenario.label}, {scenario.duration}{_RESET}")

        if self._verbosity >= 1 and scenario.description:
            self._emit(f"   {scenario.description.strip()}")

        if (self._verbosity >= 2 and scenario.is_failed) or self._verbosity >= 3:
            self._details(suite, scenario)

    def summary(self, score: SuiteScore) -> None:
        if score.total == 0:
            return
        if score.failed:
            self._emit(
                f"{score.successful} (of {score.total}) tests passed, "
                f"{_RED}{score.failed} tests failed,{_RESET} "
                f"rated as {score.rating}, spent {score.duration}"
            )
        else:
            self._emit(
                f"{_GREEN}{score.successful} (of {score.total}) tests passed, "
                f"{score.failed} tests failed, rated as {score.rating}, "
                f"spent {score.duration}{_RESET}"
            )

    def _details(self, suite: Suite, scenario: Scenario) -> None:
        self._helpers(suite, scenario.before_refs)

        self._emit("~~~~~")
        self._emit(f">> stdout:\n{scenario.stdout}")
        self._emit(self._exit_line(scenario))
        self._emit("~~~~~")

        self._helpers(suite, scenario.after_refs)

    def _helpers(self, suite: Suite, handles: Sequence[ScenarioHandle]) -> None:
        for handle in handles:
            helper = suite[handle]
            self._emit(f"(run: {helper.name})")
            self._emit(f">> script:\n{helper.script.strip()}")
            self._emit(f">> stdout:\n{helper.stdout}")
            self._emit(self._exit_line(helper))
            self._emit("---")

    @staticmethod
    def _exit_line(scenario: Scenario) -> str:
        if scenario.result is None:
            return ">> exit status 0 (successful)"
        return f">> {scenario.result} (failure)"

    def _emit(self, message: str) -> None:
        if not self._color:
            message = _ANSI_RE.sub("", message)
            message = message.replace("✓", "success").replace("✗", "FAILURE")
        self._sink.info(message)
