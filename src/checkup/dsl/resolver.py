from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from .model import Scenario, ScenarioHandle, Suite, SuiteConfigError

logger = logging.getLogger(__name__)


def resolve_suite(suite: Suite, *, workdir: Path | None = None) -> Suite:
    """Return a normalized copy of ``suite`` ready to be executed.

    Environment and working directory are inherited left to right, weights and
    visibility flags are settled, and every before/after name is turned into a
    handle. Unknown or ambiguous names raise :class:`SuiteConfigError`.
    """
    names = _index_names(suite.scenarios)

    inherited_env: dict[str, str] | None = None
    inherited_dir: Path | None = workdir if workdir is not None else Path.cwd()

    resolved: list[Scenario] = []
    for scenario in suite.scenarios:
        if scenario.environment is not None:
            inherited_env = scenario.environment
        environment = inherited_env

        if scenario.working_directory is not None:
            inherited_dir = scenario.working_directory
        elif inherited_dir is None:
            inherited_dir = Path.cwd()
        working_directory = inherited_dir

        displayable = bool(scenario.label)
        runnable = displayable or not scenario.name

        resolved.append(
            replace(
                scenario,
                environment=dict(environment or {}),
                working_directory=working_directory,
                displayable=displayable,
                runnable=runnable,
                weight=_resolve_weight(scenario.weight, displayable),
                before_refs=_resolve_refs(scenario, scenario.before, names),
                after_refs=_resolve_refs(scenario, scenario.after, names),
            )
        )

    result = Suite(name=suite.name, scenarios=resolved)
    logger.debug(
        "Resolved suite %r: %d eligible of %d cases",
        result.name,
        len(result.eligible_handles()),
        len(result),
    )
    return result


def _index_names(scenarios: Sequence[Scenario]) -> dict[str, ScenarioHandle]:
    counts = Counter(scenario.name for scenario in scenarios if scenario.name)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        msg = f"Duplicate case names: {', '.join(duplicates)}"
        raise SuiteConfigError(msg)
    return {
        scenario.name: ScenarioHandle(index)
        for index, scenario in enumerate(scenarios)
        if scenario.name
    }


def _resolve_refs(
    scenario: Scenario,
    references: Sequence[str],
    names: dict[str, ScenarioHandle],
) -> tuple[ScenarioHandle, ...]:
    handles: list[ScenarioHandle] = []
    for reference in references:
        handle = names.get(reference)
        if handle is None:
            msg = f"Case {scenario.display_name!r} references unknown case {reference!r}"
            raise SuiteConfigError(msg)
        handles.append(handle)
    return tuple(handles)


def _resolve_weight(weight: int | None, displayable: bool) -> int:
    if not displayable:
        return 0
    return weight or 1
