"""Project walker: enumerates directories and runs scanners over them.

Discovery Algorithm:
    1. Enumerate directories breadth first from the root (depth 0). With
       ``recursive=False`` only the root is visited. Excluded names (fnmatch
       patterns) are never entered and descent stops at ``max_depth``.
    2. Symlinked directories are skipped unless ``follow_symlinks`` is set.
       Canonical (resolved) paths are tracked either way, so a directory
       reachable twice is scanned once and symlink cycles terminate.
    3. Every ``(directory, scanner)`` pair is scanned on a thread pool.
       ``Executor.map`` returns results in submission order, so merging them
       yields exactly what a sequential pass would: directory order, then
       scanner registration order, then scanner output order.
    4. Each command is stamped with its origin directory, depth, and
       workspace, then wrapped in a ``DiscoveredCommand`` with its index.

Scanner failures and unreadable directories become ``ScanDiagnostic``
entries on the snapshot; nothing raised by a scanner escapes ``walk()``.
"""

from __future__ import annotations

import fnmatch
import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path

from taskscout.config import ScanConfig
from taskscout.discovery.models import DiscoveredCommand, ScanSnapshot
from taskscout.scanners.base import Command, ScanDiagnostic, Scanner
from taskscout.scanners.registry import ScannerRegistry, default_registry

logger = logging.getLogger(__name__)

WALKER_SOURCE = "walker"


def is_excluded(name: str, patterns: frozenset[str] | set[str]) -> bool:
    """Return True if a directory name matches any exclusion pattern."""
    if name in patterns:
        return True
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)


def workspace_of(directory: Path, root: Path) -> str | None:
    """First path segment of ``directory`` below ``root`` (None for the root)."""
    try:
        parts = directory.relative_to(root).parts
    except ValueError:
        return None
    return parts[0] if parts else None


class ProjectWalker:
    """Walks a project tree and collects commands from every scanner.

    Usage::

        walker = ProjectWalker(default_registry(), ScanConfig(max_depth=2))
        snapshot = walker.walk(Path("."))
        for entry in snapshot:
            print(entry.depth, entry.command.name)
    """

    def __init__(
        self,
        registry: ScannerRegistry | None = None,
        config: ScanConfig | None = None,
    ) -> None:
        self.config = config or ScanConfig()
        registry = registry or default_registry()
        if self.config.enabled_scanners is not None:
            registry = registry.restrict(self.config.enabled_scanners)
        self.registry = registry

    def enumerate_directories(
        self, root: Path,
    ) -> tuple[list[tuple[Path, int]], list[ScanDiagnostic]]:
        """List directories to scan, breadth first, with their depths."""
        directories: list[tuple[Path, int]] = []
        diagnostics: list[ScanDiagnostic] = []
        visited: set[Path] = {root.resolve()}
        queue: deque[tuple[Path, int]] = deque([(root, 0)])

        while queue:
            directory, depth = queue.popleft()
            directories.append((directory, depth))
            if not self.config.recursive or depth >= self.config.max_depth:
                continue
            try:
                children = sorted(directory.iterdir())
            except OSError as exc:
                logger.warning("Cannot read directory %s: %s", directory, exc)
                diagnostics.append(ScanDiagnostic(WALKER_SOURCE, directory, str(exc)))
                continue

            for child in children:
                if is_excluded(child.name, self.config.exclude):
                    continue
                try:
                    if not child.is_dir():
                        continue
                    if child.is_symlink() and not self.config.follow_symlinks:
                        logger.debug("Skipping symlinked directory %s", child)
                        continue
                    canonical = child.resolve()
                except OSError as exc:
                    diagnostics.append(ScanDiagnostic(WALKER_SOURCE, child, str(exc)))
                    continue
                if canonical in visited:
                    logger.debug("Already visited %s (via %s)", canonical, child)
                    continue
                visited.add(canonical)
                queue.append((child, depth + 1))
        return directories, diagnostics

    def walk(self, root: Path) -> ScanSnapshot:
        """Scan ``root`` and return an immutable snapshot.

        Args:
            root: Directory to start from.

        Returns:
            A ``ScanSnapshot`` with commands in first-discovered order.
        """
        root = Path(root).absolute()
        if not root.is_dir():
            diagnostic = ScanDiagnostic(WALKER_SOURCE, root, "not a directory")
            logger.warning("%s", diagnostic)
            return ScanSnapshot(root=root, diagnostics=(diagnostic,))

        directories, diagnostics = self.enumerate_directories(root)
        pairs: list[tuple[Path, Scanner]] = [
            (directory, scanner)
            for directory, _ in directories
            for scanner in self.registry.scanners
        ]
        logger.debug(
            "Scanning %d directories with %d scanners", len(directories), len(self.registry.scanners),
        )

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            results = list(pool.map(lambda pair: self.registry.scan_with(pair[1], pair[0]), pairs))

        depths = dict(directories)
        entries: list[DiscoveredCommand] = []
        for (directory, _), (commands, problems) in zip(pairs, results):
            diagnostics.extend(problems)
            depth = depths[directory]
            for command in commands:
                stamped = self._stamp(command, directory, depth, root)
                entries.append(DiscoveredCommand(stamped, directory, depth, len(entries)))

        logger.debug("Discovered %d command(s) under %s", len(entries), root)
        return ScanSnapshot(root=root, entries=tuple(entries), diagnostics=tuple(diagnostics))

    @staticmethod
    def _stamp(command: Command, directory: Path, depth: int, root: Path) -> Command:
        return replace(
            command,
            working_dir=command.working_dir or directory,
            origin_dir=directory,
            depth=depth,
            workspace=workspace_of(directory, root),
        )


def scan(
    root: Path,
    config: ScanConfig | None = None,
    registry: ScannerRegistry | None = None,
) -> ScanSnapshot:
    """Scan a project tree with the built-in scanners (or ``registry``).

    Args:
        root: Directory to start from.
        config: Walker settings. Defaults to ``ScanConfig()``.
        registry: Scanner registry. Defaults to ``default_registry()``.

    Returns:
        The resulting ``ScanSnapshot``.
    """
    return ProjectWalker(registry, config).walk(root)
