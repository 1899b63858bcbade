"""Tests for runbook validation.

Validation runs before any step; every problem here must surface as a
``ConfigValidationError`` (or subclass) with nothing executed.
"""

from __future__ import annotations

import pytest

from taskscout.exceptions import (
    ConfigValidationError,
    InvalidCondition,
    InvalidVariableSpec,
    UndefinedVariable,
)
from taskscout.runbook.models import Runbook, Step, VariableSpec, VarType
from taskscout.runbook.parser import parse_runbook_str
from taskscout.runbook.validation import validate_runbook, validate_variable_spec


def _runbook(steps: list[Step], **variables: VariableSpec) -> Runbook:
    return Runbook(name="rb", steps=steps, variables=dict(variables))


class TestStructure:
    def test_valid_runbook(self) -> None:
        validate_runbook(_runbook(
            [Step("build", "make {{target}}", condition="target != clean")],
            target=VariableSpec("target", default="all"),
        ))

    def test_empty_name(self) -> None:
        with pytest.raises(ConfigValidationError, match="name cannot be empty"):
            validate_runbook(Runbook(name="  ", steps=[Step("a", "b")]))

    def test_no_steps(self) -> None:
        with pytest.raises(ConfigValidationError, match="at least one step"):
            validate_runbook(Runbook(name="rb"))

    def test_step_without_name(self) -> None:
        with pytest.raises(ConfigValidationError, match="Step 2 has no name"):
            validate_runbook(_runbook([Step("a", "echo"), Step("", "echo")]))

    def test_step_without_command(self) -> None:
        with pytest.raises(ConfigValidationError, match="Step 'a' has no command"):
            validate_runbook(_runbook([Step("a", "   ")]))

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_non_positive_timeout(self, timeout: float) -> None:
        with pytest.raises(ConfigValidationError, match="timeout"):
            validate_runbook(_runbook([Step("a", "sleep 1", timeout=timeout)]))


class TestReferences:
    def test_undefined_token_in_command(self) -> None:
        with pytest.raises(UndefinedVariable) as exc_info:
            validate_runbook(_runbook([Step("deploy", "deploy {{env}}")]))
        assert exc_info.value.name == "env"
        assert exc_info.value.step == "deploy"

    def test_undefined_token_in_env(self) -> None:
        with pytest.raises(UndefinedVariable):
            validate_runbook(_runbook([Step("a", "echo", env={"TOKEN": "{{token}}"})]))

    def test_undefined_token_in_working_dir(self) -> None:
        with pytest.raises(UndefinedVariable):
            validate_runbook(_runbook([Step("a", "echo", working_dir="{{dir}}")]))

    def test_condition_on_undeclared_variable(self, deploy_runbook_text) -> None:
        runbook = parse_runbook_str(deploy_runbook_text())
        with pytest.raises(UndefinedVariable) as exc_info:
            validate_runbook(runbook)
        assert exc_info.value.name == "skip_tests"
        assert exc_info.value.step == "test"

    def test_malformed_condition(self) -> None:
        with pytest.raises(InvalidCondition):
            validate_runbook(_runbook(
                [Step("a", "echo", condition="x and y")],
                x=VariableSpec("x"),
            ))

    def test_condition_literal_type(self) -> None:
        with pytest.raises(InvalidCondition):
            validate_runbook(_runbook(
                [Step("a", "echo", condition="n == many")],
                n=VariableSpec("n", VarType.NUMBER),
            ))


class TestVariableSpecs:
    def test_select_needs_options(self) -> None:
        with pytest.raises(InvalidVariableSpec, match="at least one option"):
            validate_variable_spec(VariableSpec("env", VarType.SELECT))

    def test_default_outside_options(self) -> None:
        with pytest.raises(InvalidVariableSpec):
            validate_variable_spec(
                VariableSpec("env", VarType.SELECT, options=("a", "b"), default="c"),
            )

    def test_non_numeric_default(self) -> None:
        with pytest.raises(InvalidVariableSpec):
            validate_variable_spec(VariableSpec("n", VarType.NUMBER, default="lots"))

    def test_spec_errors_are_validation_errors(self) -> None:
        with pytest.raises(ConfigValidationError):
            validate_runbook(_runbook(
                [Step("a", "echo")],
                flag=VariableSpec("flag", VarType.BOOLEAN, default="sometimes"),
            ))
