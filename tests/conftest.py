"""Shared fixtures for taskscout tests."""

from __future__ import annotations

import json
import pathlib
from typing import Callable, Mapping

import pytest

from taskscout.runbook.executor import ProcessOutcome


class FakeExecutor:
    """Records every command instead of running it.

    ``outcomes`` maps command text to the outcome to report; anything else
    succeeds with exit status 0.
    """

    def __init__(self, outcomes: Mapping[str, ProcessOutcome] | None = None) -> None:
        self.outcomes = dict(outcomes or {})
        self.calls: list[dict] = []
        self.cancelled = 0

    def run(self, command, working_dir, env, timeout) -> ProcessOutcome:
        self.calls.append({
            "command": command,
            "working_dir": working_dir,
            "env": dict(env),
            "timeout": timeout,
        })
        return self.outcomes.get(command, ProcessOutcome(exit_code=0, output=f"ran {command}"))

    def cancel(self) -> None:
        self.cancelled += 1

    @property
    def commands(self) -> list[str]:
        return [call["command"] for call in self.calls]


@pytest.fixture
def make_executor() -> Callable[..., FakeExecutor]:
    """Factory for ``FakeExecutor`` instances."""
    return FakeExecutor


@pytest.fixture
def fake_executor() -> FakeExecutor:
    """An executor on which every command succeeds."""
    return FakeExecutor()


def write_package_json(directory: pathlib.Path, scripts: dict[str, str], **extra) -> pathlib.Path:
    directory.mkdir(parents=True, exist_ok=True)
    manifest = directory / "package.json"
    manifest.write_text(json.dumps({"name": directory.name, "scripts": scripts, **extra}))
    return manifest


@pytest.fixture
def monorepo(tmp_path: pathlib.Path) -> pathlib.Path:
    """A small multi-ecosystem project tree.

    Layout::

        root/
          package.json        (build, test)
          Makefile            (all, build)
          packages/web/       package.json (dev, test)
          services/api/       go.mod
          node_modules/dep/   package.json (excluded by default)
    """
    root = tmp_path / "root"
    write_package_json(root, {"build": "tsc", "test": "vitest"})
    (root / "Makefile").write_text(
        ".PHONY: all build\n"
        "# Build everything\n"
        "all: build\n"
        "\n"
        "build:\n"
        "\tnpm run build\n"
    )
    write_package_json(root / "packages" / "web", {"dev": "vite", "test": "vitest run"})
    api = root / "services" / "api"
    api.mkdir(parents=True)
    (api / "go.mod").write_text("module example.com/api\n\ngo 1.22\n")
    write_package_json(root / "node_modules" / "dep", {"postinstall": "node setup.js"})
    return root


DEPLOY_RUNBOOK = """\
name: deploy
description: Deploy the web app
variables:
  environment:
    type: select
    options: [staging, production]
    required: true
{extra_variables}
steps:
  - name: install
    command: npm install
  - name: test
    command: npm test
    condition: "!skip_tests"
  - name: deploy
    command: deploy --env={{{{environment}}}}
    confirm: true
"""


@pytest.fixture
def deploy_runbook_text() -> Callable[[str], str]:
    """Render the deploy runbook with optional extra variable declarations."""

    def render(extra_variables: str = "") -> str:
        return DEPLOY_RUNBOOK.format(extra_variables=extra_variables)

    return render
