"""Base interface and data structures for project scanners.

Every scanner in taskscout implements the ``Scanner`` abstract base class,
which provides a cheap probe and a full extraction step:

- ``detect(directory)`` -- Decide whether this scanner applies to a
  directory. The default implementation checks ``file_patterns`` against the
  directory's entries, which is a handful of ``stat`` calls.
- ``scan(directory)`` -- Extract all runnable commands the ecosystem's
  manifest declares.

The ``Command`` dataclass is the universal representation of a discovered
shell invocation, regardless of which ecosystem produced it. The walker fills
in the origin fields (``origin_dir``, ``depth``, ``workspace``) after a
scanner returns.

Scanners must raise ``ScanError`` for malformed manifests rather than return
partial garbage. The registry and walker turn that error into a diagnostic
and keep going, so a broken ``package.json`` never hides the Makefile next
to it.
"""

from __future__ import annotations

import json
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from taskscout.exceptions import ScanError


@dataclass(frozen=True)
class Command:
    """A discovered, runnable shell command plus descriptive metadata.

    Commands are immutable so that a published ``ScanSnapshot`` can be ranked
    concurrently without locking.

    Attributes:
        name: Display name (e.g., "npm run build").
        command: The shell text to execute (e.g., "npm run build").
        source: Ecosystem identifier ("npm", "make", "cargo", ...). Plugins
            may introduce their own identifiers.
        description: Short human-readable summary. Empty when unknown.
        working_dir: Directory the command should run in, if any.
        tags: Free-form labels used for filtering (``#tag`` queries).
        origin_dir: Directory the walker was visiting when the command was
            discovered. ``None`` until the walker stamps it.
        depth: Distance of ``origin_dir`` from the scan root.
        workspace: First path segment of ``origin_dir`` below the scan root,
            or ``None`` for commands found in the root itself.
    """

    name: str
    command: str
    source: str
    description: str = ""
    working_dir: Path | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    origin_dir: Path | None = None
    depth: int = 0
    workspace: str | None = None

    @property
    def match_text(self) -> str:
        """Text the fuzzy matcher scores a query against."""
        parts = [self.name]
        if self.description:
            parts.append(self.description)
        parts.append(self.source)
        parts.extend(self.tags)
        return " ".join(parts)


@dataclass(frozen=True)
class ScanDiagnostic:
    """A recoverable scanner failure, attached to a snapshot.

    Attributes:
        source: Scanner name (or "walker" for traversal problems).
        directory: Directory being scanned when the failure happened.
        message: Human-readable cause.
    """

    source: str
    directory: Path
    message: str

    def __str__(self) -> str:
        return f"[{self.source}] {self.directory}: {self.message}"


class Scanner(ABC):
    """Abstract base class for project scanners.

    Subclasses set ``name`` and ``file_patterns`` as class attributes and
    implement ``scan()``. Override ``detect()`` when applicability depends on
    more than the presence of a file.
    """

    name: str = ""
    file_patterns: tuple[str, ...] = ()

    def detect(self, directory: Path) -> bool:
        """Probe a directory to determine if this scanner applies.

        Args:
            directory: Directory to probe.

        Returns:
            True if any of ``file_patterns`` matches an entry in the directory.
        """
        return find_first(directory, self.file_patterns) is not None

    @abstractmethod
    def scan(self, directory: Path) -> list[Command]:
        """Extract commands from the directory's manifest(s).

        Args:
            directory: Directory for which ``detect()`` returned True.

        Returns:
            Commands in the order the manifest declares them.

        Raises:
            ScanError: If a manifest exists but cannot be read or parsed.
        """


# ---------------------------------------------------------------------------
# Shared helpers for concrete scanners
# ---------------------------------------------------------------------------


def find_first(directory: Path, patterns: tuple[str, ...] | list[str]) -> Path | None:
    """Return the first existing path in ``directory`` matching ``patterns``.

    Patterns are tried in order. Plain filenames are checked directly;
    patterns containing glob characters fall back to ``Path.glob``.
    """
    for pattern in patterns:
        if any(ch in pattern for ch in "*?["):
            matches = sorted(directory.glob(pattern))
            if matches:
                return matches[0]
            continue
        candidate = directory / pattern
        if candidate.exists():
            return candidate
    return None


def read_text(path: Path, source: str) -> str:
    """Read a manifest as UTF-8 text, converting I/O failures to ``ScanError``."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ScanError(source, str(exc), path) from exc


def load_json(path: Path, source: str) -> Any:
    """Parse a JSON manifest or raise ``ScanError``."""
    try:
        return json.loads(read_text(path, source))
    except json.JSONDecodeError as exc:
        raise ScanError(source, f"invalid JSON: {exc}", path) from exc


def load_yaml(path: Path, source: str) -> Any:
    """Parse a YAML manifest or raise ``ScanError``."""
    try:
        return yaml.safe_load(read_text(path, source))
    except yaml.YAMLError as exc:
        raise ScanError(source, f"invalid YAML: {exc}", path) from exc


def load_toml(path: Path, source: str) -> dict[str, Any]:
    """Parse a TOML manifest or raise ``ScanError``."""
    try:
        return tomllib.loads(read_text(path, source))
    except tomllib.TOMLDecodeError as exc:
        raise ScanError(source, f"invalid TOML: {exc}", path) from exc


def expect_mapping(data: Any, path: Path, source: str) -> dict[str, Any]:
    """Require a parsed document to be a mapping (empty documents become {})."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ScanError(source, "top-level document must be a mapping", path)
    return data
