"""Scanner for ``package.json`` scripts (npm, yarn, pnpm, bun).

The tool that runs the scripts is picked from the lock file sitting next to
the manifest, in precedence order:

- ``bun.lockb`` / ``bun.lock`` -- bun
- ``pnpm-lock.yaml`` -- pnpm
- ``yarn.lock`` -- yarn
- otherwise npm

.. code-block:: json

    {
      "name": "web",
      "scripts": {
        "dev": "vite",
        "build": "tsc && vite build"
      }
    }

Each script becomes one ``Command`` whose description is the script body, so
a search for "vite" finds both entries above. Three package-manager
maintenance commands (install, update, outdated) are appended.
"""

from __future__ import annotations

from pathlib import Path

from taskscout.exceptions import ScanError
from taskscout.scanners.base import Command, Scanner, expect_mapping, load_json

# Lock file -> package manager, in precedence order.
LOCKFILE_PRECEDENCE: tuple[tuple[str, str], ...] = (
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
)

_MAINTENANCE_OPS: tuple[tuple[str, str], ...] = (
    ("install", "Install dependencies"),
    ("update", "Update dependencies"),
    ("outdated", "Check for outdated packages"),
)


def detect_package_manager(directory: Path) -> str:
    """Return the package manager implied by the lock files in ``directory``."""
    for lockfile, manager in LOCKFILE_PRECEDENCE:
        if (directory / lockfile).exists():
            return manager
    return "npm"


def run_script_command(manager: str, script: str) -> str:
    """Shell text that runs ``script`` with ``manager``."""
    if manager in ("yarn", "pnpm"):
        return f"{manager} {script}"
    return f"{manager} run {script}"


class NpmScanner(Scanner):
    """Scanner for ``package.json`` scripts.

    Discovery logic:
        ``package.json`` exists in the directory.

    Parse logic:
        1. Parse the manifest; a non-object document is a ``ScanError``.
        2. Pick the package manager from the lock file precedence order.
        3. Emit one command per entry in ``scripts`` (declaration order).
        4. Append install/update/outdated for the chosen manager.
    """

    name = "npm"
    file_patterns = ("package.json",)

    def scan(self, directory: Path) -> list[Command]:
        manifest = directory / "package.json"
        data = expect_mapping(load_json(manifest, self.name), manifest, self.name)

        scripts = data.get("scripts", {})
        if scripts is None:
            scripts = {}
        if not isinstance(scripts, dict):
            raise ScanError(self.name, "'scripts' must be an object", manifest)

        manager = detect_package_manager(directory)
        commands: list[Command] = []
        for script_name, body in scripts.items():
            command = run_script_command(manager, script_name)
            commands.append(Command(
                name=f"{manager} run {script_name}",
                command=command,
                source=manager,
                description=str(body) if body is not None else "",
                working_dir=directory,
                tags=("npm", "script"),
            ))

        for op, description in _MAINTENANCE_OPS:
            command = f"{manager} {op}"
            commands.append(Command(
                name=command,
                command=command,
                source=manager,
                description=description,
                working_dir=directory,
                tags=("package-manager",),
            ))
        return commands
