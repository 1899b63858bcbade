"""Scanner registry for auto-detecting project ecosystems.

The ``ScannerRegistry`` maintains an ordered list of ``Scanner`` instances
and probes each one against a directory. Built-in scanners and externally
supplied ones are stored and invoked identically: third-party objects that
merely *look* like a scanner (``name``, ``file_patterns``, ``detect``,
``scan``) are wrapped in ``PluginScanner`` on registration.

There is no module-level registry. ``default_registry()`` builds a fresh one
on every call and callers pass it down explicitly, so tests and embedding
applications never share mutable state.

Discovery Algorithm
-------------------
``discover(directory)`` iterates over registered scanners in registration
order:

1. For each scanner, call ``detect(directory)``.
2. If True, call ``scan(directory)`` and collect the results.
3. If either call raises, record a ``ScanDiagnostic`` and continue with
   the next scanner (a broken manifest must not hide other ecosystems).
4. Return the aggregated commands plus all diagnostics.
"""

from __future__ import annotations

import logging
from importlib import metadata
from pathlib import Path
from typing import Any, Iterable

from taskscout.exceptions import ScanError
from taskscout.scanners.base import Command, ScanDiagnostic, Scanner
from taskscout.scanners.cargo import CargoScanner
from taskscout.scanners.docker import DockerComposeScanner
from taskscout.scanners.git import GitScanner
from taskscout.scanners.go_lang import GoScanner
from taskscout.scanners.makefile import MakefileScanner
from taskscout.scanners.npm import NpmScanner
from taskscout.scanners.nx import NxScanner
from taskscout.scanners.python import PythonScanner
from taskscout.scanners.taskfile import TaskfileScanner
from taskscout.scanners.turbo import TurboScanner

logger = logging.getLogger(__name__)

PLUGIN_ENTRY_POINT_GROUP = "taskscout.scanners"


class PluginScanner(Scanner):
    """Adapter giving a duck-typed external scanner the ``Scanner`` interface.

    ``name`` and ``file_patterns`` may be plain attributes or zero-argument
    callables on the wrapped object. ``detect`` is optional: without it the
    base-class file-pattern probe is used. ``scan`` may return ``Command``
    instances or mappings with ``Command`` field names.
    """

    def __init__(self, plugin: Any) -> None:
        if not callable(getattr(plugin, "scan", None)):
            raise TypeError(f"{plugin!r} has no callable scan()")
        self.plugin = plugin
        self.name = str(self._value("name") or type(plugin).__name__)
        patterns = self._value("file_patterns") or ()
        self.file_patterns = tuple(str(p) for p in patterns)

    def _value(self, attr: str) -> Any:
        value = getattr(self.plugin, attr, None)
        return value() if callable(value) else value

    def detect(self, directory: Path) -> bool:
        probe = getattr(self.plugin, "detect", None)
        if callable(probe):
            return bool(probe(directory))
        return super().detect(directory)

    def scan(self, directory: Path) -> list[Command]:
        commands: list[Command] = []
        for item in self.plugin.scan(directory) or []:
            if isinstance(item, Command):
                commands.append(item)
            elif isinstance(item, dict):
                data = dict(item)
                data.setdefault("source", self.name)
                data.setdefault("working_dir", directory)
                data["tags"] = tuple(data.get("tags") or ())
                try:
                    commands.append(Command(**data))
                except TypeError as exc:
                    raise ScanError(self.name, f"bad command entry: {exc}") from exc
            else:
                raise ScanError(self.name, f"unsupported command type {type(item).__name__}")
        return commands


class ScannerRegistry:
    """Registry of project scanners.

    Attributes:
        scanners: Ordered list of registered scanner instances.
    """

    def __init__(self) -> None:
        self.scanners: list[Scanner] = []

    def register(self, scanner: Any) -> Scanner:
        """Add a scanner to the registry.

        Scanners run in registration order. Objects that are not ``Scanner``
        subclasses are wrapped in ``PluginScanner``.

        Args:
            scanner: A ``Scanner`` or any object exposing the scanner contract.

        Returns:
            The registered (possibly wrapped) scanner.
        """
        if not isinstance(scanner, Scanner):
            scanner = PluginScanner(scanner)
        self.scanners.append(scanner)
        return scanner

    def names(self) -> list[str]:
        """Names of all registered scanners, in order."""
        return [s.name for s in self.scanners]

    def get(self, name: str) -> Scanner | None:
        """Look up a scanner by name."""
        for scanner in self.scanners:
            if scanner.name == name:
                return scanner
        return None

    def restrict(self, enabled: Iterable[str]) -> ScannerRegistry:
        """Return a new registry holding only the named scanners, order kept."""
        allowed = set(enabled)
        restricted = ScannerRegistry()
        for scanner in self.scanners:
            if scanner.name in allowed:
                restricted.scanners.append(scanner)
        return restricted

    def scan_with(
        self, scanner: Scanner, directory: Path,
    ) -> tuple[list[Command], list[ScanDiagnostic]]:
        """Run one scanner against one directory, isolating its failures."""
        try:
            if not scanner.detect(directory):
                return [], []
            commands = list(scanner.scan(directory))
        except ScanError as exc:
            logger.warning("Scanner failed: %s", exc)
            return [], [ScanDiagnostic(scanner.name, directory, exc.cause)]
        except Exception as exc:  # plugin or unexpected parser bug
            logger.warning("Scanner %s crashed in %s", scanner.name, directory, exc_info=True)
            return [], [ScanDiagnostic(scanner.name, directory, f"{type(exc).__name__}: {exc}")]
        if commands:
            logger.debug("%s: %d command(s) in %s", scanner.name, len(commands), directory)
        return commands, []

    def discover(self, directory: Path) -> tuple[list[Command], list[ScanDiagnostic]]:
        """Discover all commands in one directory using every registered scanner.

        Args:
            directory: Directory to scan.

        Returns:
            ``(commands, diagnostics)``. Commands are grouped by scanner in
            registration order.
        """
        all_commands: list[Command] = []
        diagnostics: list[ScanDiagnostic] = []
        for scanner in self.scanners:
            commands, problems = self.scan_with(scanner, directory)
            all_commands.extend(commands)
            diagnostics.extend(problems)
        return all_commands, diagnostics


def load_plugin_scanners(registry: ScannerRegistry) -> list[str]:
    """Register scanners published under the ``taskscout.scanners`` entry point.

    Each entry point may resolve to a scanner instance, a scanner class
    (instantiated without arguments), or a zero-argument factory.

    Args:
        registry: Registry to extend.

    Returns:
        Names of the scanners that were registered.
    """
    loaded: list[str] = []
    for entry_point in metadata.entry_points().select(group=PLUGIN_ENTRY_POINT_GROUP):
        try:
            target = entry_point.load()
            plugin = target() if isinstance(target, type) or not hasattr(target, "scan") else target
            scanner = registry.register(plugin)
        except Exception:
            logger.warning("Failed to load scanner plugin %s", entry_point.name, exc_info=True)
            continue
        loaded.append(scanner.name)
    return loaded


def default_registry(enabled: Iterable[str] | None = None) -> ScannerRegistry:
    """Create a ScannerRegistry pre-loaded with all built-in scanners.

    The order below is the discovery order within one directory: package
    scripts first, then task runners, monorepo pipelines, language build
    tools, containers, and finally version control.

    Args:
        enabled: Optional allow-list of scanner names.

    Returns:
        A new registry.
    """
    registry = ScannerRegistry()
    registry.register(NpmScanner())
    registry.register(MakefileScanner())
    registry.register(TaskfileScanner())
    registry.register(NxScanner())
    registry.register(TurboScanner())
    registry.register(CargoScanner())
    registry.register(GoScanner())
    registry.register(PythonScanner())
    registry.register(DockerComposeScanner())
    registry.register(GitScanner())
    if enabled is not None:
        return registry.restrict(enabled)
    return registry
