"""Scanner for go-task ``Taskfile.yml`` definitions.

.. code-block:: yaml

    version: "3"
    tasks:
      build:
        desc: Build the binary
        cmds: [go build ./...]
      _setup:
        cmds: [mkdir -p bin]

Tasks whose names start with ``.`` or ``_`` and tasks marked
``internal: true`` are not offered. ``desc`` is preferred over ``summary``
for the description.
"""

from __future__ import annotations

from pathlib import Path

from taskscout.exceptions import ScanError
from taskscout.scanners.base import Command, Scanner, expect_mapping, find_first, load_yaml

TASKFILE_NAMES: tuple[str, ...] = (
    "Taskfile.yml",
    "Taskfile.yaml",
    "taskfile.yml",
    "taskfile.yaml",
    "Taskfile.dist.yml",
    "Taskfile.dist.yaml",
)


class TaskfileScanner(Scanner):
    """Scanner for ``Taskfile.yml`` tasks."""

    name = "taskfile"
    file_patterns = TASKFILE_NAMES

    def scan(self, directory: Path) -> list[Command]:
        taskfile = find_first(directory, TASKFILE_NAMES)
        if taskfile is None:
            return []
        data = expect_mapping(load_yaml(taskfile, self.name), taskfile, self.name)

        tasks = data.get("tasks") or {}
        if not isinstance(tasks, dict):
            raise ScanError(self.name, "'tasks' must be a mapping", taskfile)

        commands: list[Command] = []
        for task_name, task in tasks.items():
            task_name = str(task_name)
            if task_name.startswith((".", "_")):
                continue
            description = ""
            if isinstance(task, dict):
                if task.get("internal"):
                    continue
                description = str(task.get("desc") or task.get("summary") or "")
            command = f"task {task_name}"
            commands.append(Command(
                name=command,
                command=command,
                source=self.name,
                description=description,
                working_dir=directory,
                tags=("task", "taskfile"),
            ))

        commands.append(Command(
            name="task --list",
            command="task --list",
            source=self.name,
            description="List all available tasks",
            working_dir=directory,
            tags=("task", "taskfile"),
        ))
        commands.append(Command(
            name="task --list-all",
            command="task --list-all",
            source=self.name,
            description="List all tasks including internal ones",
            working_dir=directory,
            tags=("task", "taskfile"),
        ))
        return commands
