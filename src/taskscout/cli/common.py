"""Helpers shared by the CLI subcommands."""

from __future__ import annotations

from pathlib import Path

from taskscout.config import TaskScoutConfig, load_config
from taskscout.scanners.registry import ScannerRegistry, default_registry, load_plugin_scanners


def load_project_config(root: Path, config_path: str | None) -> TaskScoutConfig:
    """Read ``--config`` if given, else ``.taskscout.yml`` under ``root``."""
    if config_path is not None:
        return load_config(path=Path(config_path))
    return load_config(directory=root)


def build_registry() -> ScannerRegistry:
    """Built-in scanners followed by any installed plugin scanners."""
    registry = default_registry()
    load_plugin_scanners(registry)
    return registry
