"""Tests for ``taskscout scanners`` command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from taskscout.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


class TestScannersCommand:
    def test_text_output(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["scanners"])
        assert result.exit_code == 0
        assert "Registered Scanners" in result.output
        assert "scanners registered" in result.output

    def test_json_lists_builtins_in_order(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["scanners", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        names = [entry["name"] for entry in data]
        assert names[:10] == [
            "npm", "make", "taskfile", "nx", "turbo",
            "cargo", "go", "python", "docker", "git",
        ]
        npm = data[0]
        assert npm["file_patterns"] == ["package.json"]
