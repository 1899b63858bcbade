"""Project-tree discovery.

Public API::

    from taskscout.discovery import scan

    snapshot = scan(Path("."))
    for entry in snapshot:
        print(f"{entry.origin_dir}: {entry.command.name}")
"""

from __future__ import annotations

from taskscout.discovery.models import DiscoveredCommand, ScanSnapshot
from taskscout.discovery.walker import ProjectWalker, is_excluded, scan, workspace_of

__all__ = [
    "DiscoveredCommand",
    "ProjectWalker",
    "ScanSnapshot",
    "is_excluded",
    "scan",
    "workspace_of",
]
