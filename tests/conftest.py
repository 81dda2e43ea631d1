from __future__ import annotations

from pathlib import Path

import pytest

from checkup import ScriptExecutor


@pytest.fixture()
def artifact_dir(tmp_path: Path) -> Path:
    path = tmp_path / "artifacts"
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture()
def executor(tmp_path: Path) -> ScriptExecutor:
    return ScriptExecutor(shell="/bin/sh", temp_root=tmp_path / "scratch")
