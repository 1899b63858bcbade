"""taskscout exception hierarchy.

All public exceptions inherit from TaskScoutError, giving callers a single
base class to catch when they want to handle any taskscout-specific failure
without swallowing unrelated errors.

Scanner errors are recoverable: the walker collects them as diagnostics and
keeps scanning. Runbook errors are raised before any step runs (validation
and resolution) or when a step stops the run (``RunbookFailed``).
"""

from __future__ import annotations

from typing import Any


class TaskScoutError(Exception):
    """Base exception for all taskscout errors."""


class ConfigError(TaskScoutError):
    """Raised when a taskscout configuration file is malformed."""


class ScanError(TaskScoutError):
    """Raised by a scanner when a project file cannot be read or parsed.

    Attributes:
        source: Name of the scanner that failed.
        cause: Human-readable reason (usually the underlying parser error).
        path: The file being parsed, when known.
    """

    def __init__(self, source: str, cause: str, path: Any = None) -> None:
        self.source = source
        self.cause = cause
        self.path = path
        where = f" ({path})" if path is not None else ""
        super().__init__(f"{source} scanner failed{where}: {cause}")


# ---------------------------------------------------------------------------
# Runbook errors
# ---------------------------------------------------------------------------


class RunbookError(TaskScoutError):
    """Base class for runbook parsing, validation, and execution failures."""


class RunbookParseError(RunbookError):
    """Raised when a runbook document is not valid YAML or has the wrong shape."""


class ConfigValidationError(RunbookError):
    """Raised when a runbook fails validation. No step has run."""


class UndefinedVariable(ConfigValidationError):
    """A ``{{name}}`` token or condition references an undeclared variable."""

    def __init__(self, name: str, step: str | None = None) -> None:
        self.name = name
        self.step = step
        where = f" in step '{step}'" if step else ""
        super().__init__(f"Undefined variable '{name}'{where}")


class MissingRequiredVariable(ConfigValidationError):
    """A required variable has no override, prompt answer, or default."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Required variable '{name}' has no value")


class InvalidVariableSpec(ConfigValidationError):
    """A variable declaration or supplied value is inconsistent with its type."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid variable '{name}': {reason}")


class InvalidCondition(ConfigValidationError):
    """A step condition does not match the condition grammar."""

    def __init__(self, expression: str, reason: str, step: str | None = None) -> None:
        self.expression = expression
        self.reason = reason
        self.step = step
        where = f" in step '{step}'" if step else ""
        super().__init__(f"Invalid condition {expression!r}{where}: {reason}")


class StepFailed(RunbookError):
    """A step's process exited with a non-zero status."""

    def __init__(self, step: str, exit_code: int | None) -> None:
        self.step = step
        self.exit_code = exit_code
        super().__init__(f"Step '{step}' exited with status {exit_code}")


class StepTimedOut(RunbookError):
    """A step's process exceeded its timeout and was terminated."""

    def __init__(self, step: str, timeout: float) -> None:
        self.step = step
        self.timeout = timeout
        super().__init__(f"Step '{step}' timed out after {timeout:g}s")


class StepDeclined(RunbookError):
    """The user declined a step that requires confirmation."""

    def __init__(self, step: str) -> None:
        self.step = step
        super().__init__(f"Step '{step}' was declined")


class RunbookFailed(RunbookError):
    """A step stopped the run. Carries the partial execution report.

    Attributes:
        step_name: Name of the step that stopped the run.
        cause: The underlying error (``StepFailed``, ``StepTimedOut`` or
            ``StepDeclined``).
        report: The ``RunbookExecutionReport`` recorded up to the abort.
    """

    def __init__(self, step_name: str, cause: Exception, report: Any = None) -> None:
        self.step_name = step_name
        self.cause = cause
        self.report = report
        super().__init__(f"Runbook stopped at step '{step_name}': {cause}")
