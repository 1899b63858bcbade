"""``taskscout scanners``: List all registered project scanners.

Shows the built-in scanners in discovery order, followed by any scanner
plugins installed under the ``taskscout.scanners`` entry point.
"""

from __future__ import annotations

import json

import click

from taskscout.cli.common import build_registry


@click.command("scanners")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def scanners_command(output_format: str) -> None:
    """List all registered project scanners."""
    registry = build_registry()
    if output_format == "json":
        click.echo(json.dumps([
            {"name": s.name, "file_patterns": list(s.file_patterns)}
            for s in registry.scanners
        ], indent=2))
        return
    from taskscout.cli.output import print_scanners
    print_scanners(registry)
