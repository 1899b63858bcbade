"""Scanner for Rust ``Cargo.toml`` manifests.

Emits the well-known cargo verbs for every crate, then commands derived from
the manifest itself:

- ``[[bin]]`` entries -> ``cargo run --bin <name>``
- ``[[example]]`` entries -> ``cargo run --example <name>``
- any ``[[bench]]`` -> ``cargo bench``
- ``[workspace]`` -> workspace-wide build/test plus ``-p <member>`` builds
  for literal (non-glob) members
- ``[features]`` -> ``--all-features`` variants plus one build per
  non-default feature
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from taskscout.scanners.base import Command, Scanner, load_toml


def _named_targets(entries: Any) -> list[str]:
    """Names of ``[[bin]]``-style array-of-table entries."""
    if not isinstance(entries, list):
        return []
    return [str(e["name"]) for e in entries if isinstance(e, dict) and e.get("name")]


class CargoScanner(Scanner):
    """Scanner for ``Cargo.toml``."""

    name = "cargo"
    file_patterns = ("Cargo.toml",)

    def scan(self, directory: Path) -> list[Command]:
        manifest = directory / "Cargo.toml"
        config = load_toml(manifest, self.name)

        package = config.get("package") if isinstance(config.get("package"), dict) else {}
        crate = str(package.get("name") or "project")

        commands: list[Command] = []

        def add(command: str, description: str, *tags: str) -> None:
            commands.append(Command(
                name=command,
                command=command,
                source=self.name,
                description=description,
                working_dir=directory,
                tags=("cargo", *tags),
            ))

        add("cargo build", f"Build {crate}", "build")
        add("cargo build --release", f"Build {crate} (release)", "build", "release")
        add("cargo test", f"Test {crate}", "test")
        add("cargo run", f"Run {crate}", "run")
        add("cargo check", "Check for compilation errors", "check")
        add("cargo clippy", "Run Clippy lints", "lint")
        add("cargo fmt", "Format code", "format")
        add("cargo doc --open", "Generate and open documentation", "docs")

        for bin_name in _named_targets(config.get("bin")):
            add(f"cargo run --bin {bin_name}", f"Run {bin_name} binary", "run", bin_name)

        for example in _named_targets(config.get("example")):
            add(f"cargo run --example {example}", f"Run {example} example", "example")

        if config.get("bench"):
            add("cargo bench", "Run benchmarks", "bench")

        workspace = config.get("workspace")
        if isinstance(workspace, dict):
            add("cargo build --workspace", "Build all workspace members", "workspace")
            add("cargo test --workspace", "Test all workspace members", "workspace")
            members = workspace.get("members") or []
            if isinstance(members, list):
                for member in members:
                    member = str(member)
                    if "*" in member:
                        continue
                    add(f"cargo build -p {member}", f"Build {member}", member)

        features = config.get("features")
        if isinstance(features, dict) and features:
            add("cargo build --all-features", "Build with all features enabled", "features")
            add("cargo test --all-features", "Test with all features enabled", "features")
            for feature in features:
                if feature != "default":
                    add(
                        f"cargo build --features {feature}",
                        f"Build with {feature} feature",
                        "feature", feature,
                    )
        return commands
