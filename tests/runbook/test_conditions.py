"""Tests for the step condition grammar."""

from __future__ import annotations

import pytest

from taskscout.exceptions import InvalidCondition, UndefinedVariable
from taskscout.runbook.conditions import (
    Eq,
    Neq,
    Not,
    Truthy,
    check_condition,
    evaluate,
    is_truthy,
    parse_condition,
)
from taskscout.runbook.models import VariableSpec, VarType

SPECS = {
    "skip_tests": VariableSpec("skip_tests", VarType.BOOLEAN),
    "env": VariableSpec("env", VarType.SELECT, options=("staging", "production")),
    "replicas": VariableSpec("replicas", VarType.NUMBER),
    "tag": VariableSpec("tag"),
}


class TestParse:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("skip_tests", Truthy("skip_tests")),
            ("!skip_tests", Not("skip_tests")),
            ("! skip_tests", Not("skip_tests")),
            ("env == production", Eq("env", "production")),
            ("env=='production'", Eq("env", "production")),
            ('env != "staging"', Neq("env", "staging")),
            ("  tag  ", Truthy("tag")),
        ],
    )
    def test_forms(self, text: str, expected) -> None:
        assert parse_condition(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "env ==", "a && b", "env > 3", "!", "a b"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(InvalidCondition):
            parse_condition(text, step="deploy")

    def test_error_names_step(self) -> None:
        with pytest.raises(InvalidCondition) as exc_info:
            parse_condition("a && b", step="deploy")
        assert exc_info.value.step == "deploy"
        assert "deploy" in str(exc_info.value)


class TestTruthiness:
    @pytest.mark.parametrize("value", [None, False, 0, 0.0, "", "false", "FALSE", "0", " "])
    def test_falsy(self, value) -> None:
        assert not is_truthy(value)

    @pytest.mark.parametrize("value", [True, 1, 2.5, "yes", "no", "staging"])
    def test_truthy(self, value) -> None:
        assert is_truthy(value)


class TestCheck:
    def test_undeclared_variable(self) -> None:
        with pytest.raises(UndefinedVariable) as exc_info:
            check_condition(Not("dry"), SPECS, step="test")
        assert exc_info.value.name == "dry"
        assert exc_info.value.step == "test"

    def test_literal_must_fit_type(self) -> None:
        with pytest.raises(InvalidCondition):
            check_condition(Eq("replicas", "lots"), SPECS)
        with pytest.raises(InvalidCondition):
            check_condition(Eq("skip_tests", "perhaps"), SPECS)
        check_condition(Eq("replicas", "3"), SPECS)


class TestEvaluate:
    def test_not_on_unset_boolean_is_true(self) -> None:
        assert evaluate(Not("skip_tests"), {"skip_tests": None}, SPECS)

    def test_truthy_boolean(self) -> None:
        assert evaluate(Truthy("skip_tests"), {"skip_tests": True}, SPECS)
        assert not evaluate(Truthy("skip_tests"), {"skip_tests": False}, SPECS)

    def test_select_equality(self) -> None:
        values = {"env": "production"}
        assert evaluate(Eq("env", "production"), values, SPECS)
        assert not evaluate(Neq("env", "production"), values, SPECS)
        assert evaluate(Neq("env", "staging"), values, SPECS)

    def test_typed_comparison(self) -> None:
        assert evaluate(Eq("replicas", "3"), {"replicas": 3}, SPECS)
        assert evaluate(Eq("replicas", "3.0"), {"replicas": 3}, SPECS)
        assert evaluate(Eq("skip_tests", "yes"), {"skip_tests": True}, SPECS)

    def test_unset_string_compares_as_empty(self) -> None:
        assert not evaluate(Eq("tag", "v1"), {"tag": None}, SPECS)
        assert evaluate(Neq("tag", "v1"), {"tag": None}, SPECS)
