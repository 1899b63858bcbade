"""Data models for runbooks and their execution reports.

A ``Runbook`` is the parsed form of a YAML workflow document. Execution
produces a ``RunbookExecutionReport`` with one ``StepResult`` per attempted
step (or, for a dry run, only the ``planned`` list).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class VarType(str, Enum):
    """Declared type of a runbook variable."""

    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    SELECT = "select"


@dataclass(frozen=True)
class VariableSpec:
    """Declaration of one runbook variable.

    Attributes:
        name: Variable name, referenced as ``{{name}}``.
        type: Declared type; values are coerced to it.
        prompt: Question shown when asking interactively.
        default: Raw default value from the document, if any.
        required: Whether resolution must produce a value.
        options: Allowed values for ``select`` variables.
    """

    name: str
    type: VarType = VarType.STRING
    prompt: str | None = None
    default: Any = None
    required: bool = False
    options: tuple[str, ...] = field(default_factory=tuple)

    @property
    def question(self) -> str:
        return self.prompt or self.name


@dataclass(frozen=True)
class Step:
    """One command of a runbook."""

    name: str
    command: str
    description: str = ""
    condition: str | None = None
    confirm: bool = False
    optional: bool = False
    continue_on_error: bool = False
    timeout: float | None = None
    working_dir: str | None = None
    env: dict[str, str] = field(default_factory=dict)


@dataclass
class Runbook:
    """A declarative, variable-parameterized, multi-step workflow."""

    name: str
    steps: list[Step] = field(default_factory=list)
    description: str = ""
    version: str | None = None
    author: str | None = None
    variables: dict[str, VariableSpec] = field(default_factory=dict)
    path: Path | None = None


class RunbookState(str, Enum):
    """Lifecycle of one engine run."""

    LOADED = "loaded"
    VALIDATING = "validating"
    FAILED_VALIDATION = "failed_validation"
    RESOLVING = "resolving"
    EXECUTING = "executing"
    COMPLETED = "completed"
    ABORTED = "aborted"


class StepStatus(str, Enum):
    """Terminal status of one step."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one step.

    Attributes:
        name: Step name.
        status: Terminal status.
        output: Combined stdout/stderr of the process.
        duration: Wall-clock seconds spent in the executor.
        exit_code: Process exit status; None when skipped or killed.
        command: The interpolated command text.
        reason: Why the step was skipped or failed, if it was.
    """

    name: str
    status: StepStatus
    output: str = ""
    duration: float = 0.0
    exit_code: int | None = None
    command: str = ""
    reason: str = ""


@dataclass(frozen=True)
class PlannedStep:
    """A step after variable interpolation and condition evaluation."""

    name: str
    command: str
    working_dir: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    will_run: bool = True
    needs_confirm: bool = False
    skip_reason: str = ""


@dataclass
class RunbookExecutionReport:
    """Everything one engine run produced.

    Attributes:
        name: Runbook name.
        variables: Resolved variable values, in declaration order.
        results: One entry per attempted step, in order.
        aborted: True when a step stopped the run.
        dry_run: True when no step was executed.
        planned: Interpolated plan for every step.
    """

    name: str
    variables: dict[str, Any] = field(default_factory=dict)
    results: list[StepResult] = field(default_factory=list)
    aborted: bool = False
    dry_run: bool = False
    planned: list[PlannedStep] = field(default_factory=list)

    def result(self, step_name: str) -> StepResult | None:
        """Return the result recorded for ``step_name``, if any."""
        for result in self.results:
            if result.name == step_name:
                return result
        return None

    @property
    def succeeded(self) -> bool:
        """True when the run finished and no step ended FAILED or TIMED_OUT."""
        if self.aborted:
            return False
        return all(
            r.status in (StepStatus.SUCCESS, StepStatus.SKIPPED) for r in self.results
        )

    def counts(self) -> dict[StepStatus, int]:
        """Number of results per status."""
        tally = {status: 0 for status in StepStatus}
        for result in self.results:
            tally[result.status] += 1
        return tally
