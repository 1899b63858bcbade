"""``taskscout scan [path]``: List every runnable command in a project tree.

Exit Codes:
    0: One or more commands found.
    1: The configuration file is invalid.
    2: No commands found under the target path.
"""

from __future__ import annotations

import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

import click

from taskscout.cli.common import build_registry, load_project_config
from taskscout.discovery.walker import scan
from taskscout.exceptions import TaskScoutError


@click.command("scan")
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False),
    required=False,
    default=".",
)
@click.option(
    "--depth", "max_depth",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum directory depth to descend (default: 5).",
)
@click.option(
    "--no-recursive",
    is_flag=True,
    default=False,
    help="Only scan PATH itself.",
)
@click.option(
    "--follow-symlinks",
    is_flag=True,
    default=False,
    help="Descend into symlinked directories.",
)
@click.option(
    "--exclude",
    multiple=True,
    help="Extra directory name or glob to skip (repeatable).",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Configuration file (default: PATH/.taskscout.yml).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def scan_command(
    path: str,
    max_depth: int | None,
    no_recursive: bool,
    follow_symlinks: bool,
    exclude: tuple[str, ...],
    config_path: str | None,
    output_format: str,
) -> None:
    """Discover runnable commands under PATH.

    Looks for package.json scripts, Makefile targets, Taskfile tasks, Nx and
    Turborepo pipelines, Cargo, Go and Python projects, Compose services and
    git repositories.
    """
    root = Path(path)
    try:
        config = load_project_config(root, config_path).scan
    except TaskScoutError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    changes: dict[str, Any] = {}
    if max_depth is not None:
        changes["max_depth"] = max_depth
    if no_recursive:
        changes["recursive"] = False
    if follow_symlinks:
        changes["follow_symlinks"] = True
    if exclude:
        changes["exclude"] = config.exclude | frozenset(exclude)
    config = replace(config, **changes)

    snapshot = scan(root, config, build_registry())

    if not snapshot.entries:
        if output_format == "json":
            from taskscout.cli.output import diagnostic_to_dict
            click.echo(json.dumps({
                "commands": [],
                "diagnostics": [diagnostic_to_dict(d) for d in snapshot.diagnostics],
                "summary": "No commands found",
            }))
        else:
            from taskscout.cli.output import print_diagnostics
            print_diagnostics(snapshot.diagnostics)
            click.echo("No commands found in the target directory.")
        sys.exit(2)

    if output_format == "json":
        from taskscout.cli.output import snapshot_to_dict
        click.echo(json.dumps(snapshot_to_dict(snapshot), indent=2))
    else:
        from taskscout.cli.output import print_commands, print_diagnostics
        print_diagnostics(snapshot.diagnostics)
        print_commands(snapshot)
