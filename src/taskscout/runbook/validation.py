"""Structural validation of a runbook, run before anything executes."""

from __future__ import annotations

from taskscout.exceptions import ConfigValidationError, InvalidVariableSpec, UndefinedVariable
from taskscout.runbook.conditions import check_condition, parse_condition
from taskscout.runbook.models import Runbook, VariableSpec, VarType
from taskscout.runbook.variables import coerce_value, step_tokens


def validate_variable_spec(spec: VariableSpec) -> None:
    """Check a variable declaration is self-consistent.

    Raises:
        InvalidVariableSpec: For a select without options, or a default
            that does not fit the declared type.
    """
    if spec.type is VarType.SELECT and not spec.options:
        raise InvalidVariableSpec(spec.name, "select variables need at least one option")
    if spec.default is not None:
        # Raises InvalidVariableSpec for a non-numeric number default or a
        # select default outside the options.
        coerce_value(spec, spec.default)


def validate_runbook(runbook: Runbook) -> None:
    """Validate a runbook without side effects.

    Raises:
        ConfigValidationError: Or one of its subclasses, for the first
            problem found.
    """
    if not runbook.name or not runbook.name.strip():
        raise ConfigValidationError("Runbook name cannot be empty")
    if not runbook.steps:
        raise ConfigValidationError(f"Runbook '{runbook.name}' must have at least one step")

    for spec in runbook.variables.values():
        validate_variable_spec(spec)

    for position, step in enumerate(runbook.steps, start=1):
        if not step.name or not step.name.strip():
            raise ConfigValidationError(f"Step {position} has no name")
        if not step.command or not step.command.strip():
            raise ConfigValidationError(f"Step '{step.name}' has no command")
        if step.timeout is not None and step.timeout <= 0:
            raise ConfigValidationError(
                f"Step '{step.name}' has a non-positive timeout ({step.timeout})",
            )
        for name in step_tokens(step):
            if name not in runbook.variables:
                raise UndefinedVariable(name, step.name)
        if step.condition is not None:
            condition = parse_condition(step.condition, step.name)
            check_condition(condition, runbook.variables, step.name)
