"""Shared fixtures for CLI tests.

Provides project trees and runbook directories for invoking the CLI
against real files.
"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def empty_dir(tmp_path: Path) -> Path:
    """An empty directory with nothing to discover."""
    target = tmp_path / "empty"
    target.mkdir()
    return target


@pytest.fixture
def runbook_dir(tmp_path: Path) -> Path:
    """A project with two runbooks under ``runbooks/``.

    ``greet`` prompts for ``who`` and writes to ``greeting.txt``;
    ``release`` has a confirmation step.
    """
    project = tmp_path / "project"
    runbooks = project / "runbooks"
    runbooks.mkdir(parents=True)
    (runbooks / "greet.yml").write_text(
        "name: greet\n"
        "description: Say hello\n"
        "variables:\n"
        "  who:\n"
        "    prompt: Who should we greet?\n"
        "    required: true\n"
        "steps:\n"
        "  - name: write\n"
        "    command: echo hello {{who}} > greeting.txt\n"
    )
    (runbooks / "release.yml").write_text(
        "name: release\n"
        "steps:\n"
        "  - name: build\n"
        "    command: echo building\n"
        "  - name: publish\n"
        "    command: echo publishing\n"
        "    confirm: true\n"
    )
    return project
