"""Tests for runbook YAML parsing and discovery."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from taskscout.exceptions import InvalidVariableSpec, RunbookParseError
from taskscout.runbook.models import VarType
from taskscout.runbook.parser import discover_runbooks, parse_runbook, parse_runbook_str


class TestParseRunbook:
    def test_deploy_document(self, deploy_runbook_text: Callable[[str], str]) -> None:
        runbook = parse_runbook_str(deploy_runbook_text())
        assert runbook.name == "deploy"
        assert runbook.description == "Deploy the web app"
        assert [s.name for s in runbook.steps] == ["install", "test", "deploy"]
        env = runbook.variables["environment"]
        assert env.type is VarType.SELECT
        assert env.options == ("staging", "production")
        assert env.required is True
        assert runbook.steps[1].condition == "!skip_tests"
        assert runbook.steps[2].command == "deploy --env={{environment}}"
        assert runbook.steps[2].confirm is True

    def test_all_step_fields(self) -> None:
        runbook = parse_runbook_str(
            "name: full\n"
            "version: 2\n"
            "author: ops\n"
            "steps:\n"
            "  - name: migrate\n"
            "    description: Apply migrations\n"
            "    command: ./migrate\n"
            "    optional: true\n"
            "    continue_on_error: true\n"
            "    timeout: 30\n"
            "    working_dir: db\n"
            "    env:\n"
            "      DEBUG: true\n"
            "      RETRIES: 3\n"
        )
        step = runbook.steps[0]
        assert runbook.version == "2"
        assert runbook.author == "ops"
        assert step.description == "Apply migrations"
        assert step.optional and step.continue_on_error
        assert step.timeout == 30.0
        assert step.working_dir == "db"
        assert step.env == {"DEBUG": "true", "RETRIES": "3"}

    def test_variable_defaults_to_string(self) -> None:
        runbook = parse_runbook_str("name: x\nvariables:\n  tag:\nsteps: []\n")
        assert runbook.variables["tag"].type is VarType.STRING

    def test_missing_name_and_steps_left_for_validation(self) -> None:
        runbook = parse_runbook_str("description: nothing\n")
        assert runbook.name == ""
        assert runbook.steps == []

    def test_path_recorded(self, tmp_path: Path, deploy_runbook_text) -> None:
        path = tmp_path / "deploy.yml"
        path.write_text(deploy_runbook_text())
        assert parse_runbook(path).path == path

    @pytest.mark.parametrize(
        "content",
        [
            "steps: [unclosed\n",
            "- just\n- a list\n",
            "name: x\nsteps: {install: npm install}\n",
            "name: x\nvariables: [a, b]\nsteps: []\n",
            "name: x\nsteps:\n  - npm install\n",
            "name: x\nsteps:\n  - name: a\n    command: b\n    confirm: maybe\n",
            "name: x\nsteps:\n  - name: a\n    command: b\n    timeout: soon\n",
            "name: x\nsteps:\n  - name: a\n    command: b\n    env: [A]\n",
        ],
    )
    def test_bad_shapes(self, content: str) -> None:
        with pytest.raises(RunbookParseError):
            parse_runbook_str(content)

    def test_unknown_variable_type(self) -> None:
        with pytest.raises(InvalidVariableSpec, match="unknown type"):
            parse_runbook_str("name: x\nvariables:\n  v:\n    type: date\nsteps: []\n")

    def test_unreadable_file(self, tmp_path: Path) -> None:
        with pytest.raises(RunbookParseError, match="Cannot read"):
            parse_runbook(tmp_path / "missing.yml")


class TestDiscoverRunbooks:
    def test_finds_both_directories(self, tmp_path: Path, deploy_runbook_text) -> None:
        hidden = tmp_path / ".taskscout" / "runbooks"
        hidden.mkdir(parents=True)
        (hidden / "deploy.yml").write_text(
            deploy_runbook_text("  skip_tests:\n    type: boolean")
        )
        visible = tmp_path / "runbooks"
        visible.mkdir()
        (visible / "release.yaml").write_text(
            "name: release\nsteps:\n  - name: tag\n    command: git tag v1\n"
        )
        (visible / "notes.md").write_text("# not a runbook\n")

        found = discover_runbooks(tmp_path)
        assert [(stem, rb.name) for stem, rb in found] == [
            ("deploy", "deploy"),
            ("release", "release"),
        ]

    def test_invalid_runbooks_skipped(self, tmp_path: Path) -> None:
        runbooks = tmp_path / "runbooks"
        runbooks.mkdir()
        (runbooks / "broken.yml").write_text("steps: [unclosed\n")
        (runbooks / "empty.yml").write_text("name: empty\n")
        (runbooks / "undefined.yml").write_text(
            "name: u\nsteps:\n  - name: a\n    command: echo {{nope}}\n"
        )
        (runbooks / "ok.yml").write_text("name: ok\nsteps:\n  - name: a\n    command: echo\n")
        assert [stem for stem, _ in discover_runbooks(tmp_path)] == ["ok"]

    def test_no_runbook_directories(self, tmp_path: Path) -> None:
        assert discover_runbooks(tmp_path) == []
