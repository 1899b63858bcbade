"""Scan and search configuration.

Defaults mirror what most projects want out of the box: recursive scanning
five levels deep, the usual build/dependency directories excluded, and
smart-case matching.

A project may override them with a ``.taskscout.yml`` (or ``.yaml``) file at
its root:

.. code-block:: yaml

    scanner:
      max_depth: 3
      exclude: [node_modules, fixtures]
      enabled: [npm, make]
    search:
      case_mode: case_sensitive
      min_score: 1.5
      context: false

Unknown keys are ignored so that newer config files keep working with older
releases. Values of the wrong type raise ``ConfigError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from taskscout.exceptions import ConfigError

CONFIG_FILENAMES: tuple[str, ...] = (".taskscout.yml", ".taskscout.yaml")

DEFAULT_EXCLUDES: frozenset[str] = frozenset({
    "node_modules",
    ".git",
    "target",
    "dist",
    "build",
    ".next",
    ".nuxt",
    ".output",
    "coverage",
    ".cache",
    ".turbo",
    ".nx",
    ".pnpm",
    "vendor",
    "__pycache__",
    ".venv",
    "venv",
})


class CaseMode(str, Enum):
    """How the fuzzy matcher treats letter case."""

    SMART_CASE = "smart_case"
    CASE_SENSITIVE = "case_sensitive"
    IGNORE_CASE = "ignore_case"


@dataclass(frozen=True)
class ScanConfig:
    """Settings for one walker pass and the ranking that follows it.

    Attributes:
        exclude: Directory names or fnmatch patterns never descended into.
        max_depth: Deepest directory level scanned (root is 0).
        follow_symlinks: Whether symlinked directories are entered.
        recursive: When False only the root directory is scanned.
        min_score: Fuzzy score floor; weaker matches are dropped.
        case_mode: Matching case policy.
        enabled_scanners: Optional allow-list of scanner names.
        max_workers: Thread pool width for the parallel scan stage.
    """

    exclude: frozenset[str] = DEFAULT_EXCLUDES
    max_depth: int = 5
    follow_symlinks: bool = False
    recursive: bool = True
    min_score: float = 0.0
    case_mode: CaseMode = CaseMode.SMART_CASE
    enabled_scanners: tuple[str, ...] | None = None
    max_workers: int = 8

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ConfigError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be >= 1, got {self.max_workers}")


@dataclass(frozen=True)
class SearchConfig:
    """Search-time settings that do not affect scanning.

    Attributes:
        context: Whether directory proximity contributes to ranking.
        limit: Maximum number of results the CLI prints (None = all).
    """

    context: bool = True
    limit: int | None = None


@dataclass(frozen=True)
class TaskScoutConfig:
    """Everything a ``.taskscout.yml`` file can set."""

    scan: ScanConfig = field(default_factory=ScanConfig)
    search: SearchConfig = field(default_factory=SearchConfig)


def _expect(section: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    value = section[key]
    # bool is an int subclass; reject it where a number is expected.
    if isinstance(value, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise ConfigError(f"'{key}' must be {_kind_name(kind)}, got {value!r}")
    if not isinstance(value, kind):
        raise ConfigError(f"'{key}' must be {_kind_name(kind)}, got {value!r}")
    return value


def _kind_name(kind: type | tuple[type, ...]) -> str:
    kinds = kind if isinstance(kind, tuple) else (kind,)
    return " or ".join(k.__name__ for k in kinds)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' section must be a mapping")
    return section


def config_from_dict(data: dict[str, Any]) -> TaskScoutConfig:
    """Build a ``TaskScoutConfig`` from a parsed config document."""
    scanner = _section(data, "scanner")
    search = _section(data, "search")

    changes: dict[str, Any] = {}
    if "exclude" in scanner:
        changes["exclude"] = frozenset(str(x) for x in _expect(scanner, "exclude", list))
    if "max_depth" in scanner:
        changes["max_depth"] = _expect(scanner, "max_depth", int)
    if "recursive" in scanner:
        changes["recursive"] = _expect(scanner, "recursive", bool)
    if "follow_symlinks" in scanner:
        changes["follow_symlinks"] = _expect(scanner, "follow_symlinks", bool)
    if "enabled" in scanner:
        changes["enabled_scanners"] = tuple(str(x) for x in _expect(scanner, "enabled", list))
    if "max_workers" in scanner:
        changes["max_workers"] = _expect(scanner, "max_workers", int)
    if "min_score" in search:
        changes["min_score"] = float(_expect(search, "min_score", (int, float)))
    if "case_mode" in search:
        raw = _expect(search, "case_mode", str)
        try:
            changes["case_mode"] = CaseMode(raw)
        except ValueError as exc:
            choices = ", ".join(m.value for m in CaseMode)
            raise ConfigError(f"'case_mode' must be one of {choices}, got {raw!r}") from exc

    search_config = SearchConfig()
    if "context" in search:
        search_config = replace(search_config, context=_expect(search, "context", bool))
    if "limit" in search:
        search_config = replace(search_config, limit=_expect(search, "limit", int))
    return TaskScoutConfig(scan=replace(ScanConfig(), **changes), search=search_config)


def find_config_file(directory: Path) -> Path | None:
    """Return the project's config file, if one exists."""
    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, directory: Path | None = None) -> TaskScoutConfig:
    """Load configuration from an explicit file or a project directory.

    Args:
        path: Explicit config file. Must exist when given.
        directory: Project root searched for ``.taskscout.yml`` when ``path``
            is None.

    Returns:
        The parsed configuration, or defaults when no file is found.

    Raises:
        ConfigError: If the file cannot be read or has invalid values.
    """
    if path is None and directory is not None:
        path = find_config_file(directory)
    if path is None:
        return TaskScoutConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
    if data is None:
        return TaskScoutConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return config_from_dict(data)
