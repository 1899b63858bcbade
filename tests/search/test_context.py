"""Tests for directory proximity scoring."""

from __future__ import annotations

from pathlib import Path

import pytest

from taskscout.search.context import path_distance, proximity_bonus


@pytest.fixture
def root(tmp_path: Path) -> Path:
    return tmp_path / "repo"


class TestPathDistance:
    def test_same_directory(self, root: Path) -> None:
        assert path_distance(root / "a", root / "a", root) == 0

    def test_parent_and_child(self, root: Path) -> None:
        assert path_distance(root, root / "a", root) == 1
        assert path_distance(root / "a" / "b", root, root) == 2

    def test_siblings(self, root: Path) -> None:
        assert path_distance(root / "packages" / "web", root / "services" / "api", root) == 4

    def test_outside_root_has_no_distance(self, root: Path, tmp_path: Path) -> None:
        assert path_distance(tmp_path / "elsewhere", root / "a", root) is None

    def test_dot_segments_normalised(self, root: Path) -> None:
        assert path_distance(root / "a" / ".." / "b", root / "b", root) == 0


class TestProximityBonus:
    def test_same_directory_is_one(self, root: Path) -> None:
        assert proximity_bonus(root, root, root) == 1.0

    def test_decays_with_distance(self, root: Path) -> None:
        assert proximity_bonus(root / "a", root / "b", root) == pytest.approx(1 / 3)

    def test_no_origin(self, root: Path) -> None:
        assert proximity_bonus(root, None, root) == 0.0

    def test_outside_root(self, root: Path, tmp_path: Path) -> None:
        assert proximity_bonus(tmp_path, root, root) == 0.0
