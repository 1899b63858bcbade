"""Data models for the discovery module.

Contains the result types produced by ``ProjectWalker``: one record per
discovered command and the immutable snapshot that ranking operates on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from taskscout.scanners.base import Command, ScanDiagnostic


@dataclass(frozen=True)
class DiscoveredCommand:
    """A command together with where and when the walker found it.

    Attributes:
        command: The discovered command (origin fields already stamped).
        origin_dir: Directory the walker was visiting.
        depth: Distance of ``origin_dir`` from the scan root (root is 0).
        index: Position in first-discovered order. Used as the final
            ranking tie-breaker.
    """

    command: Command
    origin_dir: Path
    depth: int
    index: int


@dataclass(frozen=True)
class ScanSnapshot:
    """Complete, immutable result of one scan.

    A rescan always publishes a new snapshot; nothing mutates one in use, so
    ranking can run against it from any thread.

    Attributes:
        root: The directory the scan started from.
        entries: Discovered commands in first-discovered order.
        diagnostics: Recoverable scanner and traversal failures.
    """

    root: Path
    entries: tuple[DiscoveredCommand, ...] = field(default_factory=tuple)
    diagnostics: tuple[ScanDiagnostic, ...] = field(default_factory=tuple)

    @property
    def commands(self) -> list[Command]:
        """Commands in discovery order."""
        return [entry.command for entry in self.entries]

    @property
    def sources(self) -> list[str]:
        """Distinct command sources, in order of first appearance."""
        return list(dict.fromkeys(entry.command.source for entry in self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[DiscoveredCommand]:
        return iter(self.entries)
