"""Variable tokens, value coercion and resolution.

Tokens are written ``{{name}}``, with optional whitespace inside the braces.
They may appear in a step's command, working directory and environment
values.

Resolution precedence, highest first:

1. caller override (``--var name=value``);
2. interactive prompt, when running interactively;
3. the declared default;
4. ``MissingRequiredVariable`` if the variable is required, else ``None``.

Every resolved value is coerced to the variable's declared type.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Mapping

from taskscout.exceptions import InvalidVariableSpec, MissingRequiredVariable, UndefinedVariable
from taskscout.runbook.models import Runbook, Step, VariableSpec, VarType

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")

TRUE_WORDS = frozenset({"true", "yes", "1", "on", "y"})
FALSE_WORDS = frozenset({"false", "no", "0", "off", "n", ""})

Prompter = Callable[[VariableSpec], "str | None"]


def find_tokens(text: str | None) -> list[str]:
    """Variable names referenced by ``{{name}}`` tokens in ``text``."""
    if not text:
        return []
    return TOKEN_RE.findall(text)


def step_tokens(step: Step) -> list[str]:
    """All variable names a step's templated fields reference, in order."""
    names = find_tokens(step.command)
    names.extend(find_tokens(step.working_dir))
    for value in step.env.values():
        names.extend(find_tokens(value))
    return list(dict.fromkeys(names))


def format_value(value: Any) -> str:
    """Render a resolved value for interpolation."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def interpolate(template: str, values: Mapping[str, Any]) -> str:
    """Replace every token in ``template`` with its resolved value.

    Raises:
        UndefinedVariable: If a token names a variable absent from ``values``.
    """

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in values:
            raise UndefinedVariable(name)
        return format_value(values[name])

    return TOKEN_RE.sub(substitute, template)


def parse_number(raw: Any) -> int | float:
    """Parse a number, keeping integers as ``int``.

    Raises:
        ValueError: If ``raw`` is not numeric.
    """
    if isinstance(raw, bool):
        raise ValueError(f"{raw!r} is a boolean, not a number")
    if isinstance(raw, (int, float)):
        return raw
    text = str(raw).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def parse_boolean(raw: Any) -> bool:
    """Parse a boolean from true/false/yes/no/1/0 style input.

    Raises:
        ValueError: If ``raw`` is not a recognised boolean word.
    """
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    word = str(raw).strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise ValueError(f"{raw!r} is not a boolean")


def coerce_value(spec: VariableSpec, raw: Any) -> Any:
    """Convert a raw value (override, answer, or default) to the variable's declared type.

    Raises:
        InvalidVariableSpec: If the value does not fit the declared type.
    """
    if raw is None:
        return None
    if spec.type is VarType.BOOLEAN:
        try:
            return parse_boolean(raw)
        except ValueError as exc:
            raise InvalidVariableSpec(spec.name, str(exc)) from exc
    if spec.type is VarType.NUMBER:
        try:
            return parse_number(raw)
        except ValueError as exc:
            raise InvalidVariableSpec(spec.name, f"{raw!r} is not a number") from exc
    value = format_value(raw)
    if spec.type is VarType.SELECT and value not in spec.options:
        choices = ", ".join(spec.options)
        raise InvalidVariableSpec(spec.name, f"{value!r} is not one of: {choices}")
    return value


def resolve_variables(
    runbook: Runbook,
    overrides: Mapping[str, Any] | None = None,
    interactive: bool = False,
    prompter: Prompter | None = None,
) -> dict[str, Any]:
    """Resolve every declared variable to a typed value.

    Args:
        runbook: The runbook whose variables to resolve.
        overrides: Caller-supplied values, by name.
        interactive: Whether unresolved variables may be prompted for.
        prompter: Asks for a value. Returning None or "" means no answer.

    Returns:
        Values in declaration order. Unresolved optional variables are None.

    Raises:
        UndefinedVariable: If an override names an undeclared variable.
        MissingRequiredVariable: If a required variable stays unresolved.
        InvalidVariableSpec: If a value does not fit its declared type.
    """
    overrides = dict(overrides or {})
    for name in overrides:
        if name not in runbook.variables:
            raise UndefinedVariable(name)

    values: dict[str, Any] = {}
    for name, spec in runbook.variables.items():
        raw: Any = None
        if name in overrides:
            raw = overrides[name]
        elif interactive and prompter is not None:
            answer = prompter(spec)
            if answer not in (None, ""):
                raw = answer
        if raw is None:
            raw = spec.default
        if raw is None:
            if spec.required:
                raise MissingRequiredVariable(name)
            logger.debug("Variable %s left unresolved", name)
        values[name] = coerce_value(spec, raw)
    return values
