from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, NewType

import jsonschema
import yaml

from .schema import validate_suite

logger = logging.getLogger(__name__)

ScenarioHandle = NewType("ScenarioHandle", int)


class SuiteConfigError(ValueError):
    """Raised when a suite definition cannot be loaded or resolved."""


class ScenarioStatus(str, Enum):
    """Execution state of a single scenario."""

    UNRUN = "unrun"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(slots=True)
class Scenario:
    name: str | None = None
    label: str | None = None
    description: str | None = None
    script: str = ""
    environment: dict[str, str] | None = None
    local_environment: dict[str, str] | None = None
    working_directory: Path | None = None
    weight: int | None = None
    before: tuple[str, ...] = ()
    after: tuple[str, ...] = ()
    skip: bool = False
    secret_phrase: str | None = None

    # Set by the resolver.
    displayable: bool = False
    runnable: bool = False
    before_refs: tuple[ScenarioHandle, ...] = ()
    after_refs: tuple[ScenarioHandle, ...] = ()

    # Set by the executor and runner.
    status: ScenarioStatus = ScenarioStatus.UNRUN
    stdout: str = ""
    result: str | None = None
    duration: str = ""

    @property
    def is_successful(self) -> bool:
        return self.status is ScenarioStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.status is ScenarioStatus.FAILED

    @property
    def is_eligible(self) -> bool:
        return not self.skip and (self.displayable or self.runnable)

    @property
    def display_name(self) -> str:
        return self.label or self.name or "<anonymous>"


@dataclass(slots=True)
class Suite:
    """Ordered arena of scenarios addressed by :data:`ScenarioHandle`."""

    name: str
    scenarios: list[Scenario] = field(default_factory=list)

    def __getitem__(self, handle: ScenarioHandle) -> Scenario:
        return self.scenarios[handle]

    def __len__(self) -> int:
        return len(self.scenarios)

    def handles(self) -> Iterator[ScenarioHandle]:
        for index in range(len(self.scenarios)):
            yield ScenarioHandle(index)

    def eligible_handles(self) -> list[ScenarioHandle]:
        return [handle for handle in self.handles() if self[handle].is_eligible]

    def displayable_handles(self) -> list[ScenarioHandle]:
        return [handle for handle in self.eligible_handles() if self[handle].displayable]

    def handle_for(self, name: str) -> ScenarioHandle | None:
        for handle in self.handles():
            if self[handle].name == name:
                return handle
        return None


def load_suite(source: Path | str | dict[str, Any]) -> Suite:
    """Load a suite from a YAML/JSON file or an already parsed mapping.

    Any syntax or structural problem raises :class:`SuiteConfigError` so that
    nothing is executed from a partially understood definition.
    """
    if isinstance(source, (Path, str)):
        data = _read_document(Path(source))
    else:
        data = source

    if not isinstance(data, dict):
        msg = f"Suite definition must be a mapping, got {type(data).__name__}"
        raise SuiteConfigError(msg)

    try:
        validate_suite(data)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        msg = f"Cannot recognize suite structure at {location}: {exc.message}"
        raise SuiteConfigError(msg) from exc

    scenarios = [_parse_case(raw) for raw in data.get("cases") or []]
    suite = Suite(name=data.get("name") or "", scenarios=scenarios)
    logger.debug("Loaded suite %r with %d cases", suite.name, len(suite))
    return suite


def _read_document(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read suite file {path}: {exc}"
        raise SuiteConfigError(msg) from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        msg = f"Cannot parse suite file {path}: {exc}"
        raise SuiteConfigError(msg) from exc


def _parse_case(payload: dict[str, Any]) -> Scenario:
    workdir = payload.get("workdir")
    return Scenario(
        name=payload.get("name") or None,
        label=payload.get("case") or None,
        description=payload.get("description") or None,
        script=payload.get("script") or "",
        environment=_parse_env(payload.get("global_env")),
        local_environment=_parse_env(payload.get("env")),
        working_directory=Path(workdir) if workdir else None,
        weight=payload.get("weight"),
        before=tuple(payload.get("before") or ()),
        after=tuple(payload.get("after") or ()),
        skip=bool(payload.get("skip")),
        secret_phrase=payload.get("secret_phrase"),
    )


def _parse_env(payload: dict[str, Any] | None) -> dict[str, str] | None:
    if payload is None:
        return None
    return {str(key): _env_value(value) for key, value in payload.items()}


def _env_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
