"""taskscout CLI: Find and run the commands a project already defines.

Entry point for the ``taskscout`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    scan: List every runnable command in a project tree.
    search: Fuzzy-find a command, nearest directory first.
    scanners: List the registered project scanners.
    runbook: Run or list declarative multi-step runbooks.

Usage::

    taskscout scan                              # Scan the current directory
    taskscout scan ./monorepo --depth 2
    taskscout search "test" --cwd packages/web
    taskscout search "build #docker"
    taskscout scanners
    taskscout runbook list
    taskscout runbook run runbooks/deploy.yml --var environment=staging
"""

from __future__ import annotations

import logging

import click

from taskscout import __version__
from taskscout.cli.runbook_cmd import runbook_group
from taskscout.cli.scan import scan_command
from taskscout.cli.scanners_cmd import scanners_command
from taskscout.cli.search_cmd import search_command


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Log debug output to stderr.",
)
def cli(verbose: bool) -> None:
    """taskscout: Discover, search and run project commands.

    Finds the scripts, targets and tasks a project declares across npm,
    make, Taskfile, Nx, Turborepo, Cargo, Go, Python, Compose and git, and
    runs declarative runbooks built from them.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register all subcommands
cli.add_command(scan_command)
cli.add_command(search_command)
cli.add_command(scanners_command)
cli.add_command(runbook_group)
