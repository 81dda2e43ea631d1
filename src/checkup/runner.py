from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

from .dsl.model import ScenarioHandle, Suite
from .executor import DEFAULT_SHELL, ScriptExecutor

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunConfig:
    verbosity: int = 0
    workdir: Path | None = None
    shell: str = DEFAULT_SHELL
    color: bool = True
    timeout: float | None = None


@dataclass(slots=True)
class SuiteRun:
    started_at: float
    finished_at: float | None = None

    @property
    def duration(self) -> str:
        finished = self.finished_at if self.finished_at is not None else time.monotonic()
        return format_duration(finished - self.started_at)


class SuiteRunner:
    """Execute eligible scenarios of a resolved suite in declaration order."""

    def __init__(self, executor: ScriptExecutor | None = None) -> None:
        self._executor = executor or ScriptExecutor()

    @classmethod
    def from_config(cls, config: RunConfig) -> "SuiteRunner":
        return cls(ScriptExecutor(shell=config.shell, timeout=config.timeout))

    def run(self, suite: Suite) -> SuiteRun:
        run = SuiteRun(started_at=time.monotonic())
        for _ in self.iter_run(suite):
            pass
        run.finished_at = time.monotonic()
        return run

    def iter_run(self, suite: Suite) -> Iterator[ScenarioHandle]:
        """Run each eligible scenario, yielding its handle once it finished."""
        for handle in suite.eligible_handles():
            self.run_scenario(suite, handle)
            yield handle

    def run_scenario(self, suite: Suite, handle: ScenarioHandle) -> None:
        scenario = suite[handle]
        if not scenario.script:
            logger.debug("Skipping %s: no script", scenario.display_name)
            return

        started = time.monotonic()
        self._run_helpers(suite, scenario.before_refs)
        self._executor.run(scenario)
        self._run_helpers(suite, scenario.after_refs)
        scenario.duration = format_duration(time.monotonic() - started)

    def _run_helpers(self, suite: Suite, handles: Sequence[ScenarioHandle]) -> None:
        for handle in handles:
            self._executor.run(suite[handle])


def format_duration(seconds: float) -> str:
    """Render elapsed seconds truncated to milliseconds, e.g. ``1.5s`` or ``2m3.04s``."""
    millis = int(max(seconds, 0.0) * 1000)
    if millis == 0:
        return "0s"
    if millis < 1000:
        return f"{millis}ms"

    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    whole, frac = divmod(millis, 1000)
    text = f"{whole}.{frac:03d}".rstrip("0").rstrip(".") + "s"
    if hours:
        return f"{hours}h{minutes}m{text}"
    if minutes:
        return f"{minutes}m{text}"
    return text
