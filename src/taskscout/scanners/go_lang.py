"""Scanner for Go modules (``go.mod``)."""

from __future__ import annotations

from pathlib import Path

from taskscout.scanners.base import Command, Scanner, read_text

_FIXED_VERBS: tuple[tuple[str, str, str], ...] = (
    ("go build ./...", "Build all packages", "build"),
    ("go test ./...", "Run all tests", "test"),
    ("go mod tidy", "Tidy module dependencies", "mod"),
    ("go mod download", "Download module dependencies", "mod"),
    ("go vet ./...", "Examine code for suspicious constructs", "lint"),
    ("go fmt ./...", "Format all Go source files", "format"),
)


def parse_module_name(content: str) -> str:
    """Return the module path declared in ``go.mod`` content."""
    for line in content.splitlines():
        line = line.strip()
        if line.startswith("module "):
            return line[len("module "):].strip().strip('"') or "go-project"
    return "go-project"


def _has_go_files(directory: Path) -> bool:
    return any(p.is_file() for p in directory.glob("*.go"))


class GoScanner(Scanner):
    """Scanner for ``go.mod``.

    Besides the fixed verbs, every ``cmd/<name>/`` directory holding Go
    sources yields ``go run ./cmd/<name>``, and a root ``main.go`` yields
    ``go run main.go``.
    """

    name = "go"
    file_patterns = ("go.mod",)

    def scan(self, directory: Path) -> list[Command]:
        go_mod = directory / "go.mod"
        module = parse_module_name(read_text(go_mod, self.name))

        commands: list[Command] = []

        def add(command: str, description: str, *tags: str) -> None:
            commands.append(Command(
                name=command,
                command=command,
                source=self.name,
                description=description,
                working_dir=directory,
                tags=("go", *tags),
            ))

        add("go build", f"Build {module}", "build")
        add("go run .", f"Run {module}", "run")
        for command, description, tag in _FIXED_VERBS:
            add(command, description, tag)

        cmd_dir = directory / "cmd"
        if cmd_dir.is_dir():
            for entry in sorted(cmd_dir.iterdir()):
                if entry.is_dir() and _has_go_files(entry):
                    add(f"go run ./cmd/{entry.name}", f"Run {entry.name}", "run", entry.name)

        if (directory / "main.go").is_file():
            add("go run main.go", "Run main.go directly", "run")
        return commands
