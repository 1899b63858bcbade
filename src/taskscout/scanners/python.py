"""Scanner for Python projects.

Three manifest styles are recognised, first match wins:

1. ``pyproject.toml`` -- the build tool is chosen by the ``[tool.*]`` table
   present, in precedence order Poetry, PDM, Hatch, then a generic
   pip/build fallback. Tool-declared scripts become ``<tool> run <script>``
   commands, ``[project.scripts]`` entry points are offered as-is, and
   pytest invocations are always appended.
2. ``setup.py`` -- classic setuptools verbs.
3. ``requirements.txt`` -- pip installs, plus ``requirements-dev.txt`` and
   ``requirements-test.txt`` when present.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from taskscout.scanners.base import Command, Scanner, load_toml

_SETUP_PY_VERBS: tuple[tuple[str, str, str], ...] = (
    ("install", "Install package", "setup.py"),
    ("develop", "Install package in development mode", "setup.py"),
    ("build", "Build package", "setup.py"),
    ("test", "Run tests", "test"),
    ("sdist", "Create source distribution", "dist"),
    ("bdist_wheel", "Create wheel distribution", "dist"),
)


def detect_tool(config: dict[str, Any]) -> str:
    """Return "poetry", "pdm", "hatch", or "generic" for a parsed pyproject."""
    tool = config.get("tool")
    if isinstance(tool, dict):
        for name in ("poetry", "pdm", "hatch"):
            if name in tool:
                return name
    return "generic"


def _table(data: Any, *keys: str) -> dict[str, Any]:
    """Walk nested tables, returning {} if any level is missing or not a table."""
    for key in keys:
        if not isinstance(data, dict):
            return {}
        data = data.get(key)
    return data if isinstance(data, dict) else {}


def _pdm_script_text(script: Any) -> tuple[str, str]:
    """Return ``(command_text, help)`` for a PDM script entry."""
    if isinstance(script, str):
        return script, ""
    if isinstance(script, dict):
        help_text = str(script.get("help") or "")
        for key in ("cmd", "shell", "call"):
            value = script.get(key)
            if value:
                text = " ".join(value) if isinstance(value, list) else str(value)
                return text, help_text
        composite = script.get("composite")
        if isinstance(composite, list):
            return " && ".join(str(c) for c in composite), help_text
        return "", help_text
    return "", ""


class PythonScanner(Scanner):
    """Scanner for ``pyproject.toml``, ``setup.py`` and ``requirements.txt``."""

    name = "python"
    file_patterns = ("pyproject.toml", "setup.py", "requirements.txt")

    def scan(self, directory: Path) -> list[Command]:
        if (directory / "pyproject.toml").is_file():
            return self._scan_pyproject(directory)
        if (directory / "setup.py").is_file():
            return self._scan_setup_py(directory)
        if (directory / "requirements.txt").is_file():
            return self._scan_requirements(directory)
        return []

    # -- helpers -----------------------------------------------------------

    def _command(
        self, command: str, description: str, tags: tuple[str, ...], directory: Path,
    ) -> Command:
        return Command(
            name=command,
            command=command,
            source=self.name,
            description=description,
            working_dir=directory,
            tags=("python", *tags),
        )

    def _scan_pyproject(self, directory: Path) -> list[Command]:
        config = load_toml(directory / "pyproject.toml", self.name)
        tool = detect_tool(config)
        project_name = str(
            _table(config, "project").get("name")
            or _table(config, "tool", "poetry").get("name")
            or "project"
        )

        commands: list[Command] = []
        if tool == "poetry":
            commands.extend(self._poetry_commands(config, project_name, directory))
        elif tool == "pdm":
            commands.extend(self._pdm_commands(config, project_name, directory))
        elif tool == "hatch":
            commands.extend(self._hatch_commands(config, project_name, directory))
        else:
            commands.extend(self._generic_commands(project_name, directory))

        for script in _table(config, "project", "scripts"):
            commands.append(self._command(
                script, f"Run the {script} entry point", ("script",), directory,
            ))

        commands.append(self._command(
            "python -m pytest", f"Run tests for {project_name}", ("test",), directory,
        ))
        commands.append(self._command(
            "python -m pytest -v", "Run tests with verbose output", ("test",), directory,
        ))
        commands.append(self._command(
            "python -m pytest --cov", "Run tests with coverage", ("test", "coverage"), directory,
        ))
        return commands

    def _poetry_commands(
        self, config: dict[str, Any], project_name: str, directory: Path,
    ) -> list[Command]:
        commands = [
            self._command("poetry install", f"Install dependencies for {project_name}",
                          ("poetry",), directory),
            self._command("poetry update", "Update dependencies", ("poetry",), directory),
            self._command("poetry build", "Build package", ("poetry", "build"), directory),
            self._command("poetry publish", "Publish package to PyPI", ("poetry",), directory),
            self._command("poetry shell", "Activate virtual environment", ("poetry",), directory),
        ]
        for script in _table(config, "tool", "poetry", "scripts"):
            commands.append(self._command(
                f"poetry run {script}", f"Run {script} script", ("poetry", "script"), directory,
            ))
        return commands

    def _pdm_commands(
        self, config: dict[str, Any], project_name: str, directory: Path,
    ) -> list[Command]:
        commands = [
            self._command("pdm install", f"Install dependencies for {project_name}",
                          ("pdm",), directory),
            self._command("pdm update", "Update dependencies", ("pdm",), directory),
            self._command("pdm build", "Build package", ("pdm", "build"), directory),
            self._command("pdm publish", "Publish package to PyPI", ("pdm",), directory),
        ]
        for script, entry in _table(config, "tool", "pdm", "scripts").items():
            if script == "_":
                # PDM's shared-settings table, not a script.
                continue
            text, help_text = _pdm_script_text(entry)
            description = help_text or text or f"Run {script} script"
            commands.append(self._command(
                f"pdm run {script}", description, ("pdm", "script"), directory,
            ))
        return commands

    def _hatch_commands(
        self, config: dict[str, Any], project_name: str, directory: Path,
    ) -> list[Command]:
        commands = [
            self._command("hatch env create", f"Create environment for {project_name}",
                          ("hatch",), directory),
            self._command("hatch build", "Build package", ("hatch", "build"), directory),
            self._command("hatch publish", "Publish package to PyPI", ("hatch",), directory),
            self._command("hatch shell", "Activate shell in default environment",
                          ("hatch",), directory),
            self._command("hatch test", "Run tests", ("hatch", "test"), directory),
        ]
        for env_name, env in _table(config, "tool", "hatch", "envs").items():
            for script, body in _table(env, "scripts").items():
                command = (
                    f"hatch run {script}" if env_name == "default"
                    else f"hatch run {env_name}:{script}"
                )
                text = " && ".join(str(b) for b in body) if isinstance(body, list) else str(body)
                commands.append(self._command(
                    command, text, ("hatch", "script"), directory,
                ))
        return commands

    def _generic_commands(self, project_name: str, directory: Path) -> list[Command]:
        return [
            self._command("pip install -e .", f"Install {project_name} in editable mode",
                          ("pip",), directory),
            self._command("pip install .", f"Install {project_name}", ("pip",), directory),
            self._command("python -m build", "Build package", ("build",), directory),
        ]

    def _scan_setup_py(self, directory: Path) -> list[Command]:
        return [
            self._command(f"python setup.py {verb}", description, (tag,), directory)
            for verb, description, tag in _SETUP_PY_VERBS
        ]

    def _scan_requirements(self, directory: Path) -> list[Command]:
        commands = [self._command(
            "python -m pip install -r requirements.txt",
            "Install dependencies from requirements.txt", ("pip",), directory,
        )]
        for suffix, description in (("dev", "Install dev dependencies"),
                                    ("test", "Install test dependencies")):
            filename = f"requirements-{suffix}.txt"
            if (directory / filename).is_file():
                commands.append(self._command(
                    f"python -m pip install -r {filename}", description,
                    ("pip", suffix), directory,
                ))
        return commands
