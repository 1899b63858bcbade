"""Rich output formatting helpers for the taskscout CLI.

Tables for discovered commands, search results, scanners, runbooks and
runbook reports, plus the JSON shapes the ``--format json`` options print.

Status Color Mapping:
    SUCCESS = bold green, FAILED = bold red, TIMED_OUT = yellow, SKIPPED = dim
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from taskscout.discovery.models import ScanSnapshot
from taskscout.runbook.models import Runbook, RunbookExecutionReport, StepStatus
from taskscout.scanners.base import Command, ScanDiagnostic
from taskscout.scanners.registry import ScannerRegistry
from taskscout.search.ranker import SearchResult

_STATUS_STYLES: dict[StepStatus, str] = {
    StepStatus.SUCCESS: "bold green",
    StepStatus.FAILED: "bold red",
    StepStatus.TIMED_OUT: "yellow",
    StepStatus.SKIPPED: "dim",
}

console = Console()
err_console = Console(stderr=True)


def status_style(status: StepStatus) -> str:
    """Return the Rich style string for a step status."""
    return _STATUS_STYLES.get(status, "white")


def _relative(path: Path | None, root: Path) -> str:
    if path is None:
        return "-"
    try:
        relative = path.relative_to(root)
    except ValueError:
        return str(path)
    return str(relative) if relative.parts else "."


# ---------------------------------------------------------------------------
# JSON shapes
# ---------------------------------------------------------------------------


def command_to_dict(command: Command) -> dict[str, Any]:
    """JSON-serializable form of a command."""
    return {
        "name": command.name,
        "command": command.command,
        "source": command.source,
        "description": command.description,
        "working_dir": str(command.working_dir) if command.working_dir else None,
        "tags": list(command.tags),
        "origin_dir": str(command.origin_dir) if command.origin_dir else None,
        "depth": command.depth,
        "workspace": command.workspace,
    }


def diagnostic_to_dict(diagnostic: ScanDiagnostic) -> dict[str, str]:
    return {
        "source": diagnostic.source,
        "directory": str(diagnostic.directory),
        "message": diagnostic.message,
    }


def snapshot_to_dict(snapshot: ScanSnapshot) -> dict[str, Any]:
    return {
        "root": str(snapshot.root),
        "commands": [command_to_dict(c) for c in snapshot.commands],
        "diagnostics": [diagnostic_to_dict(d) for d in snapshot.diagnostics],
    }


def search_results_to_dict(query: str, results: list[SearchResult]) -> dict[str, Any]:
    return {
        "query": query,
        "results": [
            {**command_to_dict(r.command), "score": r.score, "proximity": round(r.proximity, 6)}
            for r in results
        ],
    }


def report_to_dict(report: RunbookExecutionReport) -> dict[str, Any]:
    """JSON-serializable form of a runbook execution report."""
    return {
        "name": report.name,
        "variables": report.variables,
        "aborted": report.aborted,
        "dry_run": report.dry_run,
        "planned": [
            {
                "name": p.name,
                "command": p.command,
                "working_dir": p.working_dir,
                "env": p.env,
                "will_run": p.will_run,
                "needs_confirm": p.needs_confirm,
                "skip_reason": p.skip_reason,
            }
            for p in report.planned
        ],
        "results": [
            {
                "name": r.name,
                "status": r.status.value,
                "exit_code": r.exit_code,
                "duration": round(r.duration, 3),
                "command": r.command,
                "reason": r.reason,
                "output": r.output,
            }
            for r in report.results
        ],
    }


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def print_commands(snapshot: ScanSnapshot) -> None:
    """Print every discovered command grouped in discovery order."""
    table = Table(title="Discovered Commands", show_header=True, header_style="bold")
    table.add_column("Command", style="bold")
    table.add_column("Source", style="cyan")
    table.add_column("Location", style="dim")
    table.add_column("Description")

    for entry in snapshot.entries:
        command = entry.command
        table.add_row(
            command.name,
            command.source,
            _relative(entry.origin_dir, snapshot.root),
            command.description or "-",
        )
    console.print(table)
    sources = snapshot.sources
    console.print(
        f"[bold]{len(snapshot)}[/bold] commands from "
        f"{len(sources)} source(s): {', '.join(sources)}"
    )


def print_search_results(results: list[SearchResult], root: Path) -> None:
    """Print ranked search results, best first."""
    table = Table(title="Search Results", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Command", style="bold")
    table.add_column("Source", style="cyan")
    table.add_column("Location", style="dim")
    table.add_column("Score", justify="right")

    for rank, result in enumerate(results, start=1):
        table.add_row(
            str(rank),
            result.command.name,
            result.command.source,
            _relative(result.command.origin_dir, root),
            f"{result.score:.2f}",
        )
    console.print(table)


def print_diagnostics(diagnostics: tuple[ScanDiagnostic, ...] | list[ScanDiagnostic]) -> None:
    """Print recoverable scan problems to stderr."""
    for diagnostic in diagnostics:
        err_console.print(f"[yellow]warning:[/yellow] {diagnostic}")


def print_scanners(registry: ScannerRegistry) -> None:
    """Print the registered scanners and the files they look for."""
    table = Table(title="Registered Scanners", show_header=True, header_style="bold")
    table.add_column("Scanner", style="bold")
    table.add_column("Detects")
    for scanner in registry.scanners:
        table.add_row(scanner.name, ", ".join(scanner.file_patterns) or "-")
    console.print(table)
    console.print(f"\n[bold]{len(registry.scanners)}[/bold] scanners registered")


def print_runbook_list(runbooks: list[tuple[str, Runbook]]) -> None:
    """Print discovered runbooks."""
    table = Table(title="Runbooks", show_header=True, header_style="bold")
    table.add_column("Runbook", style="bold")
    table.add_column("Name")
    table.add_column("Steps", justify="right")
    table.add_column("Description", style="dim")
    for stem, runbook in runbooks:
        table.add_row(stem, runbook.name, str(len(runbook.steps)), runbook.description or "-")
    console.print(table)


def print_plan(report: RunbookExecutionReport) -> None:
    """Print the interpolated plan of a dry run."""
    table = Table(title=f"Dry run: {report.name}", show_header=True, header_style="bold")
    table.add_column("Step", style="bold")
    table.add_column("Command")
    table.add_column("Runs", justify="center")
    table.add_column("Confirm", justify="center")
    for plan in report.planned:
        runs = Text("yes", style="green") if plan.will_run else Text("skip", style="dim")
        confirm = Text("yes", style="yellow") if plan.needs_confirm else Text("-", style="dim")
        table.add_row(plan.name, plan.command, runs, confirm)
    console.print(table)


def print_report(report: RunbookExecutionReport) -> None:
    """Print step results and a one-line summary."""
    table = Table(title=f"Runbook: {report.name}", show_header=True, header_style="bold")
    table.add_column("Step", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Duration", justify="right")
    table.add_column("Detail", style="dim")
    for result in report.results:
        status = Text(result.status.value.upper(), style=status_style(result.status))
        duration = f"{result.duration:.2f}s" if result.status is not StepStatus.SKIPPED else "-"
        table.add_row(result.name, status, duration, result.reason or "-")
    console.print(table)

    for result in report.results:
        if result.status in (StepStatus.FAILED, StepStatus.TIMED_OUT) and result.output:
            console.print(f"\n[bold]Output of {result.name}:[/bold]")
            console.print(result.output.rstrip(), markup=False, highlight=False)

    counts = report.counts()
    parts = [f"[bold]{len(report.results)}[/bold] of {len(report.planned)} steps"]
    for status in StepStatus:
        if counts[status]:
            style = status_style(status)
            parts.append(f"[{style}]{counts[status]} {status.value}[/{style}]")
    if report.aborted:
        parts.append("[bold red]aborted[/bold red]")
    console.print(" | ".join(parts))
