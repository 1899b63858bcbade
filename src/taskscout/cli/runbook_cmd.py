"""``taskscout runbook``: Run and list runbooks.

Subcommands:
    run: Execute a runbook file (or a discovered runbook by name).
    list: Show runbooks under ``.taskscout/runbooks/`` and ``runbooks/``.

Exit Codes for ``run``:
    0: Every step succeeded, was skipped, or was allowed to fail.
    1: A step stopped the run.
    2: The runbook could not be parsed or failed validation.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from taskscout.exceptions import (
    ConfigValidationError,
    RunbookFailed,
    RunbookParseError,
    TaskScoutError,
)
from taskscout.runbook.engine import run_runbook
from taskscout.runbook.models import PlannedStep, Runbook, VariableSpec, VarType
from taskscout.runbook.parser import discover_runbooks, parse_runbook


def _parse_overrides(pairs: tuple[str, ...]) -> dict[str, str]:
    """Turn ``--var name=value`` options into a mapping."""
    overrides: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected NAME=VALUE, got {pair!r}", param_hint="--var")
        overrides[name.strip()] = value
    return overrides


def _load(target: str) -> Runbook:
    """Load a runbook from a path, or by name from the current project."""
    path = Path(target)
    if path.is_file():
        return parse_runbook(path)
    for stem, runbook in discover_runbooks(Path.cwd()):
        if target in (stem, runbook.name):
            return runbook
    raise RunbookParseError(f"No runbook file or discovered runbook named '{target}'")


def _prompt_variable(spec: VariableSpec) -> str | None:
    """Ask for a variable value on the terminal."""
    default = None if spec.default is None else str(spec.default)
    if spec.type is VarType.SELECT:
        return click.prompt(
            spec.question, type=click.Choice(list(spec.options)), default=default,
        )
    if spec.type is VarType.BOOLEAN:
        return "true" if click.confirm(spec.question, default=default in ("true", "True")) else "false"
    answer = click.prompt(spec.question, default=default or "", show_default=default is not None)
    return answer or None


def _confirm_step(plan: PlannedStep) -> bool:
    return click.confirm(f"Run step '{plan.name}': {plan.command}?", default=False)


@click.group("runbook")
def runbook_group() -> None:
    """Run and list runbooks."""


@runbook_group.command("run")
@click.argument("target")
@click.option(
    "--var", "variables",
    multiple=True,
    metavar="NAME=VALUE",
    help="Set a runbook variable (repeatable).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show the interpolated plan without running anything.",
)
@click.option(
    "--yes", "-y",
    is_flag=True,
    default=False,
    help="Approve every confirmation step.",
)
@click.option(
    "--non-interactive",
    is_flag=True,
    default=False,
    help="Never prompt; use overrides and defaults only.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def run_command(
    target: str,
    variables: tuple[str, ...],
    dry_run: bool,
    yes: bool,
    non_interactive: bool,
    output_format: str,
) -> None:
    """Run the runbook TARGET (a file path or a discovered runbook name).

    Exit code 0 on success, 1 if a step stopped the run, 2 if the runbook
    is invalid.
    """
    from taskscout.cli.output import print_plan, print_report, report_to_dict

    overrides = _parse_overrides(variables)
    try:
        runbook = _load(target)
        report = run_runbook(
            runbook,
            overrides=overrides,
            dry_run=dry_run,
            interactive=not non_interactive,
            prompter=_prompt_variable,
            confirmer=(lambda plan: True) if yes else _confirm_step,
        )
    except RunbookFailed as exc:
        if output_format == "json":
            click.echo(json.dumps({**report_to_dict(exc.report), "error": str(exc)}, indent=2))
        else:
            print_report(exc.report)
            click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except (RunbookParseError, ConfigValidationError) as exc:
        if output_format == "json":
            click.echo(json.dumps({"error": str(exc)}))
        else:
            click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
    except TaskScoutError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(report_to_dict(report), indent=2))
    elif report.dry_run:
        print_plan(report)
    else:
        print_report(report)


@runbook_group.command("list")
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False),
    required=False,
    default=".",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def list_command(path: str, output_format: str) -> None:
    """List runbooks found under PATH."""
    runbooks = discover_runbooks(Path(path))
    if output_format == "json":
        click.echo(json.dumps([
            {
                "id": stem,
                "name": runbook.name,
                "description": runbook.description,
                "steps": len(runbook.steps),
                "variables": list(runbook.variables),
                "path": str(runbook.path) if runbook.path else None,
            }
            for stem, runbook in runbooks
        ], indent=2))
        return
    if not runbooks:
        click.echo("No runbooks found.")
        return
    from taskscout.cli.output import print_runbook_list
    print_runbook_list(runbooks)
