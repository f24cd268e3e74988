"""Console rendering of engine results."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .backup import BackupSnapshot
from .doctor import Check, Level
from .installer import InstallResult, InstallStatus
from .reconcile import Action, RunReport
from .state import LinkState
from .units import ConfigUnit

STATE_STYLES = {
    LinkState.ABSENT: "yellow",
    LinkState.LINKED_CORRECTLY: "green",
    LinkState.LINKED_INCORRECTLY: "red",
    LinkState.REAL_ENTRY: "magenta",
}

LEVEL_MARKERS = {
    Level.OK: "[green][OK][/green]",
    Level.INFO: "[cyan]\\[i][/cyan]",
    Level.WARNING: "[yellow][!][/yellow]",
    Level.ISSUE: "[red][X][/red]",
}

ACTION_LEVELS = {
    Action.ALREADY_LINKED: Level.OK,
    Action.LINKED: Level.OK,
    Action.RELINKED: Level.OK,
    Action.BACKED_UP: Level.WARNING,
    Action.LINK_FAILED: Level.ISSUE,
    Action.BACKUP_FAILED: Level.ISSUE,
    Action.EXCLUDED_REMOVED: Level.INFO,
    Action.NOT_LINKED: Level.INFO,
    Action.UNLINKED: Level.OK,
    Action.RESTORED: Level.OK,
    Action.SKIPPED_REAL: Level.WARNING,
    Action.RESTORE_SKIPPED: Level.ISSUE,
    Action.UNLINK_FAILED: Level.ISSUE,
}

INSTALL_LEVELS = {
    InstallStatus.ALREADY_INSTALLED: Level.OK,
    InstallStatus.INSTALLED: Level.OK,
    InstallStatus.PLANNED: Level.INFO,
    InstallStatus.MANUAL: Level.WARNING,
    InstallStatus.NOT_ON_PATH: Level.WARNING,
    InstallStatus.FAILED: Level.ISSUE,
}


def header(console: Console, text: str) -> None:
    console.print(f"\n[bold blue]==> {escape(text)}[/bold blue]")


def line(console: Console, level: Level, text: str) -> None:
    console.print(f"{LEVEL_MARKERS[level]} {escape(text)}")


def print_run_report(console: Console, report: RunReport) -> None:
    """Print one line per unit, then a summary."""
    for result in report.results:
        text = f"{result.name}: {result.action.value}"
        if result.message:
            text += f" ({result.message})"
        line(console, ACTION_LEVELS[result.action], text)

    if not report.results:
        line(console, Level.WARNING, f"No configs found in {report.source_dir}")
    if report.operation == "link" and report.snapshot is not None:
        line(console, Level.INFO, f"Backups saved to {report.snapshot}")

    failures = report.failures
    if failures:
        header(console, f"{report.operation.capitalize()} finished with {len(failures)} failure(s)")
    else:
        header(console, f"{report.operation.capitalize()} complete!")


def status_table(rows: Sequence[Tuple[ConfigUnit, LinkState]]) -> Table:
    table = Table(title="Dotfiles Status")
    table.add_column("Config", style="cyan")
    table.add_column("Status")
    for unit, state in rows:
        table.add_row(escape(unit.name), f"[{STATE_STYLES[state]}]{state.label}")
    return table


def print_status(
    console: Console,
    source_dir: Path,
    target_dir: Path,
    rows: Sequence[Tuple[ConfigUnit, LinkState]],
) -> None:
    console.print(f"Source: {escape(str(source_dir))}")
    console.print(f"Target: {escape(str(target_dir))}")
    if not rows:
        line(console, Level.WARNING, f"No configs found in {source_dir}")
        return
    console.print(status_table(rows))


def print_checks(console: Console, checks: Iterable[Check]) -> None:
    issues = 0
    for check in checks:
        line(console, check.level, check.message)
        if check.level is Level.ISSUE:
            issues += 1
    if issues:
        header(console, f"Found {issues} issue(s)")
    else:
        header(console, "All checks passed!")


def print_install_results(console: Console, results: List[InstallResult]) -> None:
    for result in results:
        text = f"{result.tool}: {result.status.value}"
        if result.detail:
            text += f" ({result.detail})"
        line(console, INSTALL_LEVELS[result.status], text)


def print_snapshots(console: Console, snapshots: Sequence[BackupSnapshot]) -> None:
    if not snapshots:
        console.print("[yellow]No backups found.")
        return
    table = Table(title="Backups")
    table.add_column("Timestamp", style="yellow")
    table.add_column("Contents", style="magenta")
    table.add_column("Path", style="blue")
    for snapshot in snapshots:
        contents = ", ".join(snapshot.entries) or "No content"
        table.add_row(snapshot.timestamp, escape(contents), escape(str(snapshot.path)))
    console.print(table)
