from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .dsl import load_suite, resolve_suite
from .dsl.model import Suite
from .report import SuiteReporter, SuiteScore, score_suite
from .runner import RunConfig, SuiteRun, SuiteRunner


@dataclass(slots=True)
class ExecutionResult:
    suite: Suite
    run: SuiteRun
    score: SuiteScore


class ExecutionOrchestrator:
    """High-level runner that ties suite loading, execution and reporting."""

    def __init__(
        self,
        config: RunConfig | None = None,
        *,
        runner: SuiteRunner | None = None,
        reporter: SuiteReporter | None = None,
    ) -> None:
        self._config = config or RunConfig()
        self._runner = runner or SuiteRunner.from_config(self._config)
        self._reporter = reporter or SuiteReporter(
            verbosity=self._config.verbosity,
            color=self._config.color,
        )

    def execute(self, source: Path | str | dict[str, Any]) -> ExecutionResult:
        suite = resolve_suite(load_suite(source), workdir=self._config.workdir)

        self._reporter.header(suite)
        run = SuiteRun(started_at=time.monotonic())
        if suite.displayable_handles():
            self._reporter.separator()
            sequence = 1
            for handle in self._runner.iter_run(suite):
                if suite[handle].displayable:
                    self._reporter.scenario(suite, handle, sequence)
                    sequence += 1
            self._reporter.separator()
        run.finished_at = time.monotonic()

        score = score_suite(suite, run)
        self._reporter.summary(score)
        return ExecutionResult(suite=suite, run=run, score=score)
