"""``taskscout search <query> [path]``: Fuzzy-find a command.

The query is a fuzzy pattern that may include filters: ``#tag``,
``source:<name>`` and ``@<workspace>``. Results nearer the current
directory win ties unless ``--no-context`` is given.

Exit Codes:
    0: At least one command matched.
    1: No command matched, or the configuration file is invalid.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from taskscout.cli.common import build_registry, load_project_config
from taskscout.discovery.walker import scan
from taskscout.exceptions import TaskScoutError
from taskscout.search.ranker import rank


@click.command("search")
@click.argument("query")
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False),
    required=False,
    default=".",
)
@click.option(
    "--cwd", "current_dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory to rank proximity from (default: current directory).",
)
@click.option(
    "--no-context",
    is_flag=True,
    default=False,
    help="Ignore directory proximity when ranking.",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Show at most N results.",
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
def search_command(
    query: str,
    path: str,
    current_dir: str | None,
    no_context: bool,
    limit: int | None,
    config_path: str | None,
    output_format: str,
) -> None:
    """Search the commands under PATH for QUERY."""
    root = Path(path)
    try:
        config = load_project_config(root, config_path)
    except TaskScoutError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    snapshot = scan(root, config.scan, build_registry())
    context_enabled = config.search.context and not no_context
    cwd = Path(current_dir).absolute() if current_dir else Path.cwd()
    results = rank(query, snapshot, context_enabled, cwd, config.scan)

    limit = limit or config.search.limit
    if limit is not None:
        results = results[:limit]

    if output_format == "json":
        from taskscout.cli.output import search_results_to_dict
        click.echo(json.dumps(search_results_to_dict(query, results), indent=2))
    elif results:
        from taskscout.cli.output import print_search_results
        print_search_results(results, snapshot.root)
    else:
        click.echo(f"No commands match '{query}'.")

    if not results:
        sys.exit(1)
