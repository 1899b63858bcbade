"""Scanner for Nx workspaces (``nx.json``).

Discovery logic:
    ``nx.json`` exists in the directory (the workspace root).

Parse logic:
    1. Every key of ``targetDefaults`` becomes a workspace-wide
       ``nx run-many --target=<name>`` command.
    2. ``project.json`` files directly under ``apps/``, ``libs/``,
       ``packages/`` and ``projects/`` (plus a root ``project.json``) yield
       ``nx <target> <project>`` per target, and one
       ``--configuration=<cfg>`` variant per target configuration.
    3. A fixed set of workspace commands (graph, affected, reset) is appended.

A malformed ``nx.json`` is a ``ScanError``. A malformed ``project.json`` only
drops that project: the workspace-level commands are still useful.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from taskscout.exceptions import ScanError
from taskscout.scanners.base import Command, Scanner, expect_mapping, load_json

logger = logging.getLogger(__name__)

PROJECT_DIRS: tuple[str, ...] = ("apps", "libs", "packages", "projects")

_COMMON: tuple[tuple[str, str, str], ...] = (
    ("nx graph", "Visualize the project graph", "visualization"),
    ("nx affected --target=build", "Build affected projects", "affected"),
    ("nx affected --target=test", "Test affected projects", "affected"),
    ("nx affected --target=lint", "Lint affected projects", "affected"),
    ("nx run-many --target=build --all", "Build all projects", "all"),
    ("nx run-many --target=test --all", "Test all projects", "all"),
    ("nx reset", "Reset Nx cache", "cache"),
)


class NxScanner(Scanner):
    """Scanner for Nx workspaces."""

    name = "nx"
    file_patterns = ("nx.json",)

    def scan(self, directory: Path) -> list[Command]:
        nx_json = directory / "nx.json"
        config = expect_mapping(load_json(nx_json, self.name), nx_json, self.name)

        commands: list[Command] = []
        defaults = config.get("targetDefaults") or {}
        if not isinstance(defaults, dict):
            raise ScanError(self.name, "'targetDefaults' must be an object", nx_json)
        for target in defaults:
            commands.append(self._command(
                f"nx run-many --target={target}",
                f"Run {target} for all projects",
                ("monorepo",),
                directory,
            ))

        for project_json in self._project_files(directory):
            commands.extend(self._project_commands(project_json, directory))

        for command, description, tag in _COMMON:
            commands.append(self._command(command, description, (tag,), directory))
        return commands

    def _command(
        self, name: str, description: str, tags: tuple[str, ...], directory: Path,
    ) -> Command:
        return Command(
            name=name,
            command=f"npx {name}",
            source=self.name,
            description=description,
            working_dir=directory,
            tags=("nx", *tags),
        )

    def _project_files(self, directory: Path) -> list[Path]:
        files: list[Path] = []
        for project_dir in PROJECT_DIRS:
            base = directory / project_dir
            if not base.is_dir():
                continue
            for child in sorted(base.iterdir()):
                candidate = child / "project.json"
                if child.is_dir() and candidate.is_file():
                    files.append(candidate)
        root_project = directory / "project.json"
        if root_project.is_file():
            files.append(root_project)
        return files

    def _project_commands(self, project_json: Path, workspace_root: Path) -> list[Command]:
        try:
            project = expect_mapping(
                load_json(project_json, self.name), project_json, self.name,
            )
        except ScanError as exc:
            logger.warning("Skipping Nx project: %s", exc)
            return []

        default_name = "root" if project_json.parent == workspace_root else project_json.parent.name
        project_name = str(project.get("name") or default_name)
        raw_tags = project.get("tags")
        project_tags = tuple(str(t) for t in raw_tags if t) if isinstance(raw_tags, list) else ()
        targets: dict[str, Any] = project.get("targets") or {}
        if not isinstance(targets, dict):
            return []

        commands: list[Command] = []
        for target_name, target in targets.items():
            description = f"Run {target_name} for {project_name}"
            executor = target.get("executor") if isinstance(target, dict) else None
            if executor:
                description = f"Nx target using {executor}"
            commands.append(self._command(
                f"nx {target_name} {project_name}",
                description,
                (project_name, *project_tags),
                workspace_root,
            ))
            configurations = target.get("configurations") if isinstance(target, dict) else None
            if isinstance(configurations, dict):
                for config_name in configurations:
                    commands.append(self._command(
                        f"nx {target_name} {project_name} --configuration={config_name}",
                        f"{target_name} with {config_name} configuration",
                        (project_name, str(config_name)),
                        workspace_root,
                    ))
        return commands
