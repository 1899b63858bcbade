"""Scanner for Turborepo pipelines (``turbo.json``).

Both the legacy ``pipeline`` key and the v2 ``tasks`` key are read. A plain
task name yields ``turbo run <task>`` for the whole monorepo; a
``<package>#<task>`` entry yields the per-package variant
``turbo run <task> --filter=<package>``. Root-only tasks (``#task``, or
``//#task``) are skipped.
"""

from __future__ import annotations

from pathlib import Path

from taskscout.exceptions import ScanError
from taskscout.scanners.base import Command, Scanner, expect_mapping, load_json

_COMMON: tuple[tuple[str, str, str, str], ...] = (
    ("turbo run build", "npx turbo run build", "Build all packages", "build"),
    ("turbo run test", "npx turbo run test", "Test all packages", "test"),
    ("turbo run lint", "npx turbo run lint", "Lint all packages", "lint"),
    ("turbo run dev", "npx turbo run dev", "Start development servers", "dev"),
    ("turbo daemon stop", "npx turbo daemon stop", "Stop Turbo daemon", "daemon"),
)


class TurboScanner(Scanner):
    """Scanner for ``turbo.json``."""

    name = "turbo"
    file_patterns = ("turbo.json",)

    def scan(self, directory: Path) -> list[Command]:
        config_path = directory / "turbo.json"
        config = expect_mapping(load_json(config_path, self.name), config_path, self.name)

        task_names: list[str] = []
        for key in ("pipeline", "tasks"):
            section = config.get(key)
            if section is None:
                continue
            if not isinstance(section, dict):
                raise ScanError(self.name, f"'{key}' must be an object", config_path)
            for task_name in section:
                if task_name not in task_names:
                    task_names.append(str(task_name))

        commands: list[Command] = []
        seen: set[str] = set()

        def add(name: str, command: str, description: str, tags: tuple[str, ...]) -> None:
            if name in seen:
                return
            seen.add(name)
            commands.append(Command(
                name=name,
                command=command,
                source=self.name,
                description=description,
                working_dir=directory,
                tags=("turbo", *tags),
            ))

        for task_name in task_names:
            if task_name.startswith(("#", "//#")):
                continue
            if "#" in task_name:
                package, _, task = task_name.partition("#")
                add(
                    f"turbo run {task} --filter={package}",
                    f"npx turbo run {task} --filter={package}",
                    f"Run {task} for {package}",
                    (package,),
                )
            else:
                add(
                    f"turbo run {task_name}",
                    f"npx turbo run {task_name}",
                    f"Run {task_name} for all packages",
                    ("monorepo",),
                )

        for name, command, description, tag in _COMMON:
            add(name, command, description, (tag,))
        return commands
