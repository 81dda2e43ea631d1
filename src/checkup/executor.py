from __future__ import annotations

import logging
import os
import signal
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from string import Template
from typing import Mapping, MutableMapping

from .dsl.model import Scenario, ScenarioStatus

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "/bin/bash"

SCRIPT_TEMPLATE = Template(
    "#!/usr/bin/env bash\n"
    "# generated by checkup\n"
    "set -e\n"
    "\n"
    "${script}\n"
)


@dataclass(slots=True)
class ExitStatus:
    """Exit information for a finished script subprocess."""

    returncode: int | None
    signal: int | None

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0 and self.signal is None

    def describe(self) -> str:
        if self.signal is not None:
            try:
                name = signal.Signals(self.signal).name
            except ValueError:
                name = str(self.signal)
            return f"signal: {name}"
        return f"exit status {self.returncode}"


@dataclass(slots=True)
class ExecutionOutcome:
    output: bytes = b""
    exit_status: ExitStatus | None = None
    error: str | None = None


class ScriptExecutor:
    """Run one scenario's script in a shell subprocess and record the outcome."""

    def __init__(
        self,
        *,
        shell: str = DEFAULT_SHELL,
        timeout: float | None = None,
        temp_root: Path | None = None,
    ) -> None:
        if not shell:
            msg = "Shell must not be empty"
            raise ValueError(msg)
        self._shell = shell
        self._timeout = timeout
        self._temp_root = temp_root

    def run(self, scenario: Scenario) -> ExecutionOutcome:
        """Execute ``scenario.script`` and update its runtime fields.

        Scenarios without a script are left untouched and an empty outcome is
        returned.
        """
        if not scenario.script:
            return ExecutionOutcome()

        if self._temp_root is not None:
            self._temp_root.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="._", dir=self._temp_root) as tmp_dir:
            script_path = Path(tmp_dir) / "script.sh"
            script_path.write_text(render_script(scenario.script), encoding="utf-8")
            outcome = self._spawn(scenario, script_path)

        scenario.stdout = outcome.output.decode("utf-8", errors="replace").strip()
        if outcome.exit_status is not None and outcome.exit_status.succeeded:
            scenario.status = ScenarioStatus.SUCCESS
            scenario.result = None
        else:
            scenario.status = ScenarioStatus.FAILED
            scenario.result = outcome.error or (
                outcome.exit_status.describe() if outcome.exit_status else "unknown failure"
            )
        logger.debug(
            "Ran %s in %s: %s",
            scenario.display_name,
            scenario.working_directory,
            scenario.result or "ok",
        )
        return outcome

    def _spawn(self, scenario: Scenario, script_path: Path) -> ExecutionOutcome:
        cwd = scenario.working_directory
        try:
            process = subprocess.Popen(
                [self._shell, str(script_path)],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                cwd=str(cwd) if cwd is not None else None,
                env=self._prepare_env(scenario.environment, scenario.local_environment),
                start_new_session=True,
            )
        except OSError as exc:
            return ExecutionOutcome(error=str(exc))

        try:
            output, _ = process.communicate(timeout=self._timeout)
        except subprocess.TimeoutExpired:
            self._kill_group(process)
            output, _ = process.communicate()
            return ExecutionOutcome(
                output=output or b"",
                error=f"timeout after {self._timeout}s",
            )

        returncode = process.returncode
        if returncode < 0:
            exit_status = ExitStatus(returncode=None, signal=abs(returncode))
        else:
            exit_status = ExitStatus(returncode=returncode, signal=None)
        return ExecutionOutcome(output=output or b"", exit_status=exit_status)

    @staticmethod
    def _kill_group(process: subprocess.Popen[bytes]) -> None:
        """Kill the script and everything it forked; it leads its own session."""

        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:  # pragma: no cover - race condition guard
            return

    @staticmethod
    def _prepare_env(*overlays: Mapping[str, str] | None) -> MutableMapping[str, str]:
        merged: MutableMapping[str, str] = dict(os.environ)
        for overlay in overlays:
            if overlay is not None:
                merged.update(overlay)
        return merged


def render_script(script: str) -> str:
    return SCRIPT_TEMPLATE.substitute(script=script)
