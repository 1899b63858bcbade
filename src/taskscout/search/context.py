"""Directory proximity between the invocation directory and a command's origin."""

from __future__ import annotations

import os
from pathlib import Path


def _normalize(path: Path) -> Path:
    return Path(os.path.abspath(path))


def path_distance(current_dir: Path, origin_dir: Path, root: Path) -> int | None:
    """Number of path segments between two directories.

    Counts the steps up from ``current_dir`` to the deepest common ancestor
    and back down to ``origin_dir``. Returns None when that ancestor is not
    the scan root or a directory below it.
    """
    current = _normalize(current_dir)
    origin = _normalize(origin_dir)
    scan_root = _normalize(root)
    try:
        common = Path(os.path.commonpath([current, origin]))
    except ValueError:
        # Different drives on Windows.
        return None
    if common != scan_root and scan_root not in common.parents:
        return None
    shared = len(common.parts)
    return (len(current.parts) - shared) + (len(origin.parts) - shared)


def proximity_bonus(current_dir: Path, origin_dir: Path | None, root: Path) -> float:
    """Bonus in ``[0.0, 1.0]``: 1.0 for the same directory, 1/(1+d) otherwise.

    Commands without an origin, or without a common ancestor inside the scan
    root, get 0.0.
    """
    if origin_dir is None:
        return 0.0
    distance = path_distance(current_dir, origin_dir, root)
    if distance is None:
        return 0.0
    return 1.0 / (1.0 + distance)
