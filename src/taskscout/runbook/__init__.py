"""Runbooks: declarative, variable-parameterized multi-step workflows.

Public API::

    from taskscout.runbook import parse_runbook, run_runbook

    runbook = parse_runbook(Path("runbooks/deploy.yml"))
    report = run_runbook(runbook, overrides={"environment": "staging"})
    for result in report.results:
        print(result.name, result.status.value)
"""

from __future__ import annotations

from taskscout.runbook.conditions import Eq, Neq, Not, Truthy, evaluate, parse_condition
from taskscout.runbook.engine import RunbookEngine, run_runbook
from taskscout.runbook.executor import ProcessExecutor, ProcessOutcome, SubprocessExecutor
from taskscout.runbook.models import (
    PlannedStep,
    Runbook,
    RunbookExecutionReport,
    RunbookState,
    Step,
    StepResult,
    StepStatus,
    VariableSpec,
    VarType,
)
from taskscout.runbook.parser import discover_runbooks, parse_runbook, parse_runbook_str
from taskscout.runbook.validation import validate_runbook
from taskscout.runbook.variables import find_tokens, interpolate, resolve_variables

__all__ = [
    "Eq",
    "Neq",
    "Not",
    "PlannedStep",
    "ProcessExecutor",
    "ProcessOutcome",
    "Runbook",
    "RunbookEngine",
    "RunbookExecutionReport",
    "RunbookState",
    "Step",
    "StepResult",
    "StepStatus",
    "SubprocessExecutor",
    "Truthy",
    "VarType",
    "VariableSpec",
    "discover_runbooks",
    "evaluate",
    "find_tokens",
    "interpolate",
    "parse_condition",
    "parse_runbook",
    "parse_runbook_str",
    "resolve_variables",
    "run_runbook",
    "validate_runbook",
]
