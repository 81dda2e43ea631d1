from __future__ import annotations

from .model import (
    Scenario,
    ScenarioHandle,
    ScenarioStatus,
    Suite,
    SuiteConfigError,
    load_suite,
)
from .resolver import resolve_suite
from .schema import SUITE_SCHEMA, validate_suite

__all__ = [
    "Scenario",
    "ScenarioHandle",
    "ScenarioStatus",
    "Suite",
    "SuiteConfigError",
    "load_suite",
    "resolve_suite",
    "SUITE_SCHEMA",
    "validate_suite",
]
