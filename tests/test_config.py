"""Tests for scan/search configuration loading.

Verifies:
    - Defaults when no config file exists.
    - ``.taskscout.yml`` discovery and explicit paths.
    - Type checking of every supported key (bools are not numbers).
    - Malformed documents surface as ``ConfigError``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from taskscout.config import (
    DEFAULT_EXCLUDES,
    CaseMode,
    ScanConfig,
    TaskScoutConfig,
    config_from_dict,
    find_config_file,
    load_config,
)
from taskscout.exceptions import ConfigError


class TestDefaults:
    def test_scan_defaults(self) -> None:
        config = ScanConfig()
        assert config.max_depth == 5
        assert config.recursive is True
        assert config.follow_symlinks is False
        assert config.min_score == 0.0
        assert config.case_mode is CaseMode.SMART_CASE
        assert config.enabled_scanners is None
        assert "node_modules" in config.exclude
        assert ".git" in config.exclude

    def test_no_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(directory=tmp_path) == TaskScoutConfig()

    @pytest.mark.parametrize("kwargs", [{"max_depth": -1}, {"max_workers": 0}])
    def test_invalid_values_rejected(self, kwargs: dict) -> None:
        with pytest.raises(ConfigError):
            ScanConfig(**kwargs)


class TestConfigFromDict:
    def test_all_keys(self) -> None:
        config = config_from_dict({
            "scanner": {
                "exclude": ["fixtures", "tmp*"],
                "max_depth": 2,
                "recursive": False,
                "follow_symlinks": True,
                "enabled": ["npm", "make"],
                "max_workers": 2,
            },
            "search": {
                "min_score": 1,
                "case_mode": "ignore_case",
                "context": False,
                "limit": 10,
            },
        })
        assert config.scan.exclude == frozenset({"fixtures", "tmp*"})
        assert config.scan.max_depth == 2
        assert config.scan.recursive is False
        assert config.scan.follow_symlinks is True
        assert config.scan.enabled_scanners == ("npm", "make")
        assert config.scan.max_workers == 2
        assert config.scan.min_score == 1.0
        assert config.scan.case_mode is CaseMode.IGNORE_CASE
        assert config.search.context is False
        assert config.search.limit == 10

    def test_exclude_replaces_defaults(self) -> None:
        config = config_from_dict({"scanner": {"exclude": []}})
        assert config.scan.exclude == frozenset()
        assert config_from_dict({}).scan.exclude == DEFAULT_EXCLUDES

    def test_unknown_keys_ignored(self) -> None:
        config = config_from_dict({"scanner": {"colour": "blue"}, "future": {}})
        assert config == TaskScoutConfig()

    @pytest.mark.parametrize(
        "data",
        [
            {"scanner": {"max_depth": True}},
            {"scanner": {"max_depth": "3"}},
            {"scanner": {"exclude": "node_modules"}},
            {"scanner": {"recursive": "yes"}},
            {"search": {"min_score": False}},
            {"search": {"case_mode": "loud"}},
            {"search": {"limit": 1.5}},
            {"scanner": ["max_depth"]},
        ],
    )
    def test_wrong_types_rejected(self, data: dict) -> None:
        with pytest.raises(ConfigError):
            config_from_dict(data)


class TestLoadConfig:
    def test_finds_project_file(self, tmp_path: Path) -> None:
        (tmp_path / ".taskscout.yml").write_text("scanner:\n  max_depth: 1\n")
        assert find_config_file(tmp_path) == tmp_path / ".taskscout.yml"
        assert load_config(directory=tmp_path).scan.max_depth == 1

    def test_yaml_extension(self, tmp_path: Path) -> None:
        (tmp_path / ".taskscout.yaml").write_text("search:\n  context: false\n")
        assert load_config(directory=tmp_path).search.context is False

    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        (tmp_path / ".taskscout.yml").write_text("scanner:\n  max_depth: 1\n")
        other = tmp_path / "ci.yml"
        other.write_text("scanner:\n  max_depth: 3\n")
        assert load_config(path=other, directory=tmp_path).scan.max_depth == 3

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / ".taskscout.yml"
        path.write_text("")
        assert load_config(path=path) == TaskScoutConfig()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / ".taskscout.yml"
        path.write_text("scanner: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path=path)

    def test_non_mapping_document(self, tmp_path: Path) -> None:
        path = tmp_path / ".taskscout.yml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path=path)

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(path=tmp_path / "nope.yml")
