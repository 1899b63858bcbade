"""Step condition grammar.

Conditions are deliberately tiny. Four forms exist:

==================  ============================================
``name``            true when the value is truthy
``!name``           true when the value is falsy
``name == value``   true when the value equals the literal
``name != value``   true when the value differs from the literal
==================  ============================================

Literals may be wrapped in single or double quotes. Comparison uses the
variable's declared type, so ``count == 3`` matches a number variable
resolved from ``"3"`` and ``flag == yes`` matches a boolean ``True``.

A value is falsy when it is None, an empty string, ``False``, zero, or the
strings ``"false"`` and ``"0"`` (any case).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Union

from taskscout.exceptions import InvalidCondition, UndefinedVariable
from taskscout.runbook.models import VariableSpec, VarType
from taskscout.runbook.variables import format_value, parse_boolean, parse_number

_COMPARE_RE = re.compile(r"^(\w+)\s*(==|!=)\s*(.*)$")
_NOT_RE = re.compile(r"^!\s*(\w+)$")
_NAME_RE = re.compile(r"^(\w+)$")

_FALSY_STRINGS = frozenset({"", "false", "0"})


@dataclass(frozen=True)
class Truthy:
    name: str


@dataclass(frozen=True)
class Not:
    name: str


@dataclass(frozen=True)
class Eq:
    name: str
    literal: str


@dataclass(frozen=True)
class Neq:
    name: str
    literal: str


Condition = Union[Truthy, Not, Eq, Neq]


def _unquote(literal: str) -> str:
    if len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in "'\"":
        return literal[1:-1]
    return literal


def parse_condition(expression: str, step: str | None = None) -> Condition:
    """Parse a condition string.

    Raises:
        InvalidCondition: If the text matches none of the four forms.
    """
    text = expression.strip()
    if not text:
        raise InvalidCondition(expression, "condition is empty", step)

    match = _COMPARE_RE.match(text)
    if match:
        name, operator, literal = match.groups()
        literal = literal.strip()
        if not literal:
            raise InvalidCondition(expression, f"missing value after '{operator}'", step)
        node = Eq if operator == "==" else Neq
        return node(name, _unquote(literal))

    match = _NOT_RE.match(text)
    if match:
        return Not(match.group(1))

    match = _NAME_RE.match(text)
    if match:
        return Truthy(match.group(1))

    raise InvalidCondition(
        expression, "expected 'name', '!name', 'name == value' or 'name != value'", step,
    )


def is_truthy(value: Any) -> bool:
    """Truthiness of a resolved variable value."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() not in _FALSY_STRINGS


def coerce_literal(condition: Eq | Neq, spec: VariableSpec, step: str | None = None) -> Any:
    """Convert a comparison literal to the variable's declared type.

    Raises:
        InvalidCondition: If the literal cannot be a value of that type.
    """
    expression = f"{condition.name} {'==' if isinstance(condition, Eq) else '!='} {condition.literal}"
    try:
        if spec.type is VarType.BOOLEAN:
            return parse_boolean(condition.literal)
        if spec.type is VarType.NUMBER:
            return parse_number(condition.literal)
    except ValueError as exc:
        raise InvalidCondition(expression, f"{exc} (variable is {spec.type.value})", step) from exc
    return condition.literal


def check_condition(
    condition: Condition, specs: Mapping[str, VariableSpec], step: str | None = None,
) -> None:
    """Validate a parsed condition against the declared variables.

    Raises:
        UndefinedVariable: If the condition names an undeclared variable.
        InvalidCondition: If a literal does not fit the variable's type.
    """
    if condition.name not in specs:
        raise UndefinedVariable(condition.name, step)
    if isinstance(condition, (Eq, Neq)):
        coerce_literal(condition, specs[condition.name], step)


def evaluate(
    condition: Condition, values: Mapping[str, Any], specs: Mapping[str, VariableSpec],
) -> bool:
    """Evaluate a parsed condition against resolved values."""
    value = values.get(condition.name)
    if isinstance(condition, Truthy):
        return is_truthy(value)
    if isinstance(condition, Not):
        return not is_truthy(value)
    spec = specs[condition.name]
    expected = coerce_literal(condition, spec)
    if spec.type in (VarType.STRING, VarType.SELECT):
        value = format_value(value)
    equal = value == expected
    return equal if isinstance(condition, Eq) else not equal
