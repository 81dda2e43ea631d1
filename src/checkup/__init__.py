"""Declarative shell check runner with weighted scoring."""

from .dsl import (
    Scenario,
    ScenarioHandle,
    ScenarioStatus,
    Suite,
    SuiteConfigError,
    load_suite,
    resolve_suite,
)
from .executor import ExecutionOutcome, ExitStatus, ScriptExecutor
from .orchestrator import ExecutionOrchestrator, ExecutionResult
from .report import SuiteReporter, SuiteScore, score_suite
from .runner import RunConfig, SuiteRun, SuiteRunner, format_duration

__all__ = [
    "ExecutionOrchestrator",
    "ExecutionOutcome",
    "ExecutionResult",
    "ExitStatus",
    "RunConfig",
    "Scenario",
    "ScenarioHandle",
    "ScenarioStatus",
    "ScriptExecutor",
    "Suite",
    "SuiteConfigError",
    "SuiteReporter",
    "SuiteRun",
    "SuiteRunner",
    "SuiteScore",
    "format_duration",
    "load_suite",
    "resolve_suite",
    "score_suite",
]
