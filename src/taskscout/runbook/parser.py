"""YAML runbook parser and runbook discovery.

Runbook documents look like this:

.. code-block:: yaml

    name: deploy
    description: Deploy the web app
    variables:
      environment:
        type: select
        options: [staging, production]
        required: true
      skip_tests:
        type: boolean
    steps:
      - name: install
        command: npm install
      - name: test
        command: npm test
        condition: "!skip_tests"
      - name: deploy
        command: deploy --env={{environment}}
        confirm: true

Parsing only checks shape (types of fields). Semantic checks such as
undefined tokens live in ``taskscout.runbook.validation`` so that runbooks
built in code are validated the same way.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from taskscout.exceptions import InvalidVariableSpec, RunbookError, RunbookParseError
from taskscout.runbook.models import Runbook, Step, VariableSpec, VarType
from taskscout.runbook.validation import validate_runbook

logger = logging.getLogger(__name__)

RUNBOOK_DIRS: tuple[str, ...] = (".taskscout/runbooks", "runbooks")
RUNBOOK_SUFFIXES: frozenset[str] = frozenset({".yml", ".yaml"})


def _expect_type(value: Any, kind: type | tuple[type, ...], what: str) -> Any:
    if isinstance(value, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise RunbookParseError(f"{what} must not be a boolean")
    if not isinstance(value, kind):
        raise RunbookParseError(f"{what} has the wrong type ({type(value).__name__})")
    return value


def _optional_str(data: dict[str, Any], key: str, what: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return _expect_type(value, str, f"{what} '{key}'")


def _flag(data: dict[str, Any], key: str, what: str) -> bool:
    value = data.get(key, False)
    if value is None:
        return False
    return _expect_type(value, bool, f"{what} '{key}'")


def _env_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)


def _parse_variable(name: str, data: Any) -> VariableSpec:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RunbookParseError(f"Variable '{name}' must be a mapping")
    raw_type = str(data.get("type") or "string").lower()
    try:
        var_type = VarType(raw_type)
    except ValueError as exc:
        choices = ", ".join(t.value for t in VarType)
        raise InvalidVariableSpec(name, f"unknown type {raw_type!r} (expected {choices})") from exc
    options = data.get("options") or []
    if not isinstance(options, list):
        raise RunbookParseError(f"Variable '{name}' options must be a list")
    return VariableSpec(
        name=name,
        type=var_type,
        prompt=_optional_str(data, "prompt", f"Variable '{name}'"),
        default=data.get("default"),
        required=_flag(data, "required", f"Variable '{name}'"),
        options=tuple(_env_value(option) for option in options),
    )


def _parse_step(position: int, data: Any) -> Step:
    if not isinstance(data, dict):
        raise RunbookParseError(f"Step {position} must be a mapping")
    what = f"Step {position}"
    timeout = data.get("timeout")
    if timeout is not None:
        timeout = float(_expect_type(timeout, (int, float), f"{what} 'timeout'"))
    env = data.get("env") or {}
    if not isinstance(env, dict):
        raise RunbookParseError(f"{what} 'env' must be a mapping")
    return Step(
        name=_optional_str(data, "name", what) or "",
        command=_optional_str(data, "command", what) or "",
        description=_optional_str(data, "description", what) or "",
        condition=_optional_str(data, "condition", what),
        confirm=_flag(data, "confirm", what),
        optional=_flag(data, "optional", what),
        continue_on_error=_flag(data, "continue_on_error", what),
        timeout=timeout,
        working_dir=_optional_str(data, "working_dir", what),
        env={str(key): _env_value(value) for key, value in env.items()},
    )


def runbook_from_dict(data: Any, path: Path | None = None) -> Runbook:
    """Build a ``Runbook`` from a parsed YAML document.

    Raises:
        RunbookParseError: If the document does not have the runbook shape.
        InvalidVariableSpec: If a variable declares an unknown type.
    """
    if not isinstance(data, dict):
        raise RunbookParseError("Runbook document must be a mapping")

    variables = data.get("variables") or {}
    if not isinstance(variables, dict):
        raise RunbookParseError("'variables' must be a mapping")
    steps = data.get("steps") or []
    if not isinstance(steps, list):
        raise RunbookParseError("'steps' must be a list")

    return Runbook(
        name=_optional_str(data, "name", "Runbook") or "",
        description=_optional_str(data, "description", "Runbook") or "",
        version=_optional_str(data, "version", "Runbook"),
        author=_optional_str(data, "author", "Runbook"),
        variables={
            str(name): _parse_variable(str(name), spec) for name, spec in variables.items()
        },
        steps=[_parse_step(i, step) for i, step in enumerate(steps, start=1)],
        path=path,
    )


def parse_runbook_str(content: str, path: Path | None = None) -> Runbook:
    """Parse runbook YAML text.

    Raises:
        RunbookParseError: If the text is not valid YAML or not a runbook.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        where = f" in {path}" if path is not None else ""
        raise RunbookParseError(f"Invalid YAML{where}: {exc}") from exc
    return runbook_from_dict(data, path)


def parse_runbook(path: Path) -> Runbook:
    """Read and parse a runbook file.

    Raises:
        RunbookParseError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RunbookParseError(f"Cannot read runbook {path}: {exc}") from exc
    return parse_runbook_str(content, path)


def discover_runbooks(directory: Path) -> list[tuple[str, Runbook]]:
    """Find valid runbooks under ``.taskscout/runbooks/`` and ``runbooks/``.

    Files that fail to parse or validate are logged and skipped.

    Returns:
        ``(file stem, runbook)`` pairs, directory by directory, sorted by
        file name within each.
    """
    found: list[tuple[str, Runbook]] = []
    for relative in RUNBOOK_DIRS:
        runbook_dir = directory / relative
        if not runbook_dir.is_dir():
            continue
        for path in sorted(runbook_dir.iterdir()):
            if path.suffix not in RUNBOOK_SUFFIXES or not path.is_file():
                continue
            try:
                runbook = parse_runbook(path)
                validate_runbook(runbook)
            except RunbookError as exc:
                logger.warning("Skipping runbook %s: %s", path, exc)
                continue
            found.append((path.stem, runbook))
    return found
