"""Tests for the project walker.

Verifies:
    - Breadth-first directory order, then scanner registration order.
    - Depth limits, non-recursive scans and exclusion patterns.
    - Symlink handling and cycle termination.
    - Origin stamping (origin_dir, depth, workspace, working_dir).
    - Scanner failures become diagnostics instead of aborting the walk.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from taskscout.config import ScanConfig
from taskscout.discovery.walker import ProjectWalker, is_excluded, scan, workspace_of

needs_symlinks = pytest.mark.skipif(
    not hasattr(os, "symlink") or os.name == "nt",
    reason="symlinks not available",
)


def _names(snapshot) -> list[str]:
    return [c.name for c in snapshot.commands]


class TestHelpers:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("node_modules", True), (".venv", True), ("src", False), ("build-tools", False)],
    )
    def test_default_excludes(self, name: str, expected: bool) -> None:
        assert is_excluded(name, ScanConfig().exclude) is expected

    def test_glob_patterns(self) -> None:
        assert is_excluded("tmp-cache", {"tmp*"})
        assert not is_excluded("src", {"tmp*"})

    def test_workspace_of(self, tmp_path: Path) -> None:
        assert workspace_of(tmp_path, tmp_path) is None
        assert workspace_of(tmp_path / "packages" / "web", tmp_path) == "packages"
        assert workspace_of(Path("/elsewhere"), tmp_path) is None


class TestWalkOrder:
    def test_monorepo_discovery_order(self, monorepo: Path) -> None:
        snapshot = scan(monorepo)
        names = _names(snapshot)
        assert names[:7] == [
            "npm run build",
            "npm run test",
            "npm install",
            "npm update",
            "npm outdated",
            "make all",
            "make build",
        ]
        assert names[7:9] == ["npm run dev", "npm run test"]
        assert names[12:14] == ["go build", "go run ."]
        assert snapshot.sources == ["npm", "make", "go"]

    def test_excluded_by_default(self, monorepo: Path) -> None:
        assert "npm run postinstall" not in _names(scan(monorepo))

    def test_indexes_are_sequential(self, monorepo: Path) -> None:
        snapshot = scan(monorepo)
        assert [entry.index for entry in snapshot] == list(range(len(snapshot)))

    def test_repeat_scans_are_identical(self, monorepo: Path) -> None:
        first = scan(monorepo, ScanConfig(max_workers=1))
        second = scan(monorepo, ScanConfig(max_workers=8))
        assert first.commands == second.commands


class TestStamping:
    def test_root_commands(self, monorepo: Path) -> None:
        command = scan(monorepo).commands[0]
        assert command.origin_dir == monorepo
        assert command.depth == 0
        assert command.workspace is None
        assert command.working_dir == monorepo

    def test_nested_commands(self, monorepo: Path) -> None:
        snapshot = scan(monorepo)
        web = monorepo / "packages" / "web"
        dev = next(e for e in snapshot if e.command.name == "npm run dev")
        assert dev.origin_dir == web
        assert dev.depth == 2
        assert dev.command.workspace == "packages"
        assert dev.command.working_dir == web

    def test_relative_root_is_made_absolute(
        self, monorepo: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(monorepo.parent)
        snapshot = scan(Path(monorepo.name))
        assert snapshot.root.is_absolute()
        assert snapshot.commands[0].origin_dir == monorepo


class TestLimits:
    def test_max_depth_zero_scans_root_only(self, monorepo: Path) -> None:
        snapshot = scan(monorepo, ScanConfig(max_depth=0))
        assert {entry.depth for entry in snapshot} == {0}
        assert "npm run dev" not in _names(snapshot)

    def test_max_depth_one_stops_above_packages(self, monorepo: Path) -> None:
        snapshot = scan(monorepo, ScanConfig(max_depth=1))
        assert "go build" not in _names(snapshot)

    def test_non_recursive(self, monorepo: Path) -> None:
        snapshot = scan(monorepo, ScanConfig(recursive=False))
        assert {entry.depth for entry in snapshot} == {0}

    def test_custom_excludes_replace_defaults(self, monorepo: Path) -> None:
        snapshot = scan(monorepo, ScanConfig(exclude=frozenset({"pack*"})))
        names = _names(snapshot)
        assert "npm run dev" not in names
        assert "npm run postinstall" in names

    def test_enabled_scanners(self, monorepo: Path) -> None:
        snapshot = scan(monorepo, ScanConfig(enabled_scanners=("make",)))
        assert _names(snapshot) == ["make all", "make build"]


@needs_symlinks
class TestSymlinks:
    def test_symlinked_directory_skipped_by_default(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        root.mkdir()
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "package.json").write_text(json.dumps({"scripts": {"lint": "eslint"}}))
        (root / "linked").symlink_to(outside, target_is_directory=True)

        assert "npm run lint" not in _names(scan(root))
        followed = scan(root, ScanConfig(follow_symlinks=True))
        assert "npm run lint" in _names(followed)

    def test_cycle_terminates(self, monorepo: Path) -> None:
        (monorepo / "packages" / "web" / "loop").symlink_to(monorepo, target_is_directory=True)
        snapshot = scan(monorepo, ScanConfig(follow_symlinks=True, max_depth=10))
        assert _names(snapshot).count("make all") == 1

    def test_directory_reached_twice_scanned_once(self, monorepo: Path) -> None:
        (monorepo / "alias").symlink_to(monorepo / "packages" / "web", target_is_directory=True)
        snapshot = scan(monorepo, ScanConfig(follow_symlinks=True))
        dev = [e for e in snapshot if e.command.name == "npm run dev"]
        assert len(dev) == 1
        # Breadth first: the depth-1 alias is reached before packages/web.
        assert dev[0].origin_dir == monorepo / "alias"


class TestDiagnostics:
    def test_broken_manifest_does_not_hide_siblings(self, monorepo: Path) -> None:
        (monorepo / "packages" / "web" / "package.json").write_text("{ broken")
        snapshot = scan(monorepo)
        assert "go build" in _names(snapshot)
        assert "npm run dev" not in _names(snapshot)
        assert len(snapshot.diagnostics) == 1
        diagnostic = snapshot.diagnostics[0]
        assert diagnostic.source == "npm"
        assert diagnostic.directory == monorepo / "packages" / "web"

    def test_missing_root(self, tmp_path: Path) -> None:
        snapshot = ProjectWalker().walk(tmp_path / "missing")
        assert len(snapshot) == 0
        assert snapshot.diagnostics[0].message == "not a directory"

    def test_empty_directory(self, tmp_path: Path) -> None:
        snapshot = scan(tmp_path)
        assert snapshot.commands == []
        assert snapshot.diagnostics == ()
