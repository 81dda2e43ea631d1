from __future__ import annotations

import time
from pathlib import Path

import pytest

from checkup import Scenario, ScenarioStatus, ScriptExecutor
from checkup.executor import ExitStatus, render_script


def test_successful_script_records_output(executor: ScriptExecutor, artifact_dir: Path) -> None:
    scenario = Scenario(script="echo hello\necho oops >&2\n", working_directory=artifact_dir)

    outcome = executor.run(scenario)

    assert outcome.exit_status == ExitStatus(returncode=0, signal=None)
    assert scenario.status is ScenarioStatus.SUCCESS
    assert scenario.result is None
    assert scenario.stdout == "hello\noops"


def test_failing_script_records_exit_status(executor: ScriptExecutor, artifact_dir: Path) -> None:
    scenario = Scenario(script="echo partial\nexit 3", working_directory=artifact_dir)

    executor.run(scenario)

    assert scenario.status is ScenarioStatus.FAILED
    assert scenario.result == "exit status 3"
    assert scenario.stdout == "partial"


def test_signal_termination_is_a_failure(executor: ScriptExecutor, artifact_dir: Path) -> None:
    scenario = Scenario(script="kill -KILL $$", working_directory=artifact_dir)

    executor.run(scenario)

    assert scenario.status is ScenarioStatus.FAILED
    assert scenario.result == "signal: SIGKILL"


def test_environment_overlays_process_environment(
    executor: ScriptExecutor, artifact_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CHECKUP_OUTER", "outer")
    monkeypatch.setenv("CHECKUP_KEEP", "kept")
    scenario = Scenario(
        script='echo "$CHECKUP_OUTER $CHECKUP_KEEP $CHECKUP_LOCAL"',
        environment={"CHECKUP_OUTER": "inherited", "CHECKUP_LOCAL": "global"},
        local_environment={"CHECKUP_LOCAL": "local"},
        working_directory=artifact_dir,
    )

    executor.run(scenario)

    assert scenario.stdout == "inherited kept local"


def test_script_runs_in_working_directory(executor: ScriptExecutor, artifact_dir: Path) -> None:
    (artifact_dir / "marker.txt").write_text("found", encoding="utf-8")
    scenario = Scenario(script="cat marker.txt", working_directory=artifact_dir)

    executor.run(scenario)

    assert scenario.is_successful
    assert scenario.stdout == "found"


def test_empty_script_is_a_no_op(executor: ScriptExecutor) -> None:
    scenario = Scenario(script="", stdout="previous", duration="1ms")

    outcome = executor.run(scenario)

    assert outcome.exit_status is None and outcome.output == b""
    assert scenario.status is ScenarioStatus.UNRUN
    assert scenario.stdout == "previous"
    assert scenario.result is None
    assert scenario.duration == "1ms"


def test_launch_failure_is_reported_not_raised(executor: ScriptExecutor, artifact_dir: Path) -> None:
    scenario = Scenario(script="true", working_directory=artifact_dir / "missing")

    outcome = executor.run(scenario)

    assert outcome.exit_status is None
    assert scenario.status is ScenarioStatus.FAILED
    assert scenario.result


def test_missing_interpreter_is_a_failure(tmp_path: Path, artifact_dir: Path) -> None:
    executor = ScriptExecutor(shell=str(tmp_path / "no-such-shell"))
    scenario = Scenario(script="true", working_directory=artifact_dir)

    executor.run(scenario)

    assert scenario.is_failed


def test_temporary_area_is_removed(tmp_path: Path, artifact_dir: Path) -> None:
    temp_root = tmp_path / "scratch"
    executor = ScriptExecutor(shell="/bin/sh", temp_root=temp_root)

    executor.run(Scenario(script="exit 0", working_directory=artifact_dir))
    executor.run(Scenario(script="exit 1", working_directory=artifact_dir))

    assert temp_root.exists()
    assert list(temp_root.iterdir()) == []


def test_timeout_marks_failure(tmp_path: Path, artifact_dir: Path) -> None:
    executor = ScriptExecutor(shell="/bin/sh", timeout=0.2, temp_root=tmp_path / "scratch")
    scenario = Scenario(script="exec sleep 5", working_directory=artifact_dir)

    executor.run(scenario)

    assert scenario.is_failed
    assert scenario.result == "timeout after 0.2s"


def test_timeout_kills_forked_commands(tmp_path: Path, artifact_dir: Path) -> None:
    executor = ScriptExecutor(shell="/bin/sh", timeout=0.3, temp_root=tmp_path / "scratch")
    scenario = Scenario(
        script="(sleep 1; touch late.txt) &\nsleep 5\necho done",
        working_directory=artifact_dir,
    )

    started = time.monotonic()
    executor.run(scenario)
    elapsed = time.monotonic() - started
    time.sleep(1.5)

    assert elapsed < 3
    assert scenario.result == "timeout after 0.3s"
    assert "done" not in scenario.stdout
    assert not (artifact_dir / "late.txt").exists()


def test_render_script_keeps_script_verbatim() -> None:
    rendered = render_script('echo "$HOME" ${USER}')

    assert rendered.startswith("#!/usr/bin/env bash\n")
    assert 'echo "$HOME" ${USER}' in rendered


def test_empty_shell_is_rejected() -> None:
    with pytest.raises(ValueError):
        ScriptExecutor(shell="")
