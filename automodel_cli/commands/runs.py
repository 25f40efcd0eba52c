"""Run history commands - inspect previous generate runs."""

import typer
from typing import Optional
from rich.console import Console
from rich.table import Table

from ..history import RunRecorder, get_recorder

app = typer.Typer(help="Inspect previous generate runs")
console = Console()

_STATUS_STYLES = {"success": "green", "error": "red"}


def _enabled_recorder() -> RunRecorder:
    recorder = get_recorder()
    if not recorder.enabled:
        console.print("[yellow]Run history is disabled (HISTORY_ENABLED=false)[/yellow]")
        raise typer.Exit(1)
    return recorder


@app.command("list")
def list_runs(
    since_hours: int = typer.Option(24, "--since", "-s", help="Look back this many hours"),
    status: Optional[str] = typer.Option(None, "--status", help="Only runs with this status (success, error, running)"),
    dialect: Optional[str] = typer.Option(None, "--dialect", help="Only runs against this engine"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum number of runs to show"),
):
    """List recent generate runs, newest first."""
    runs = _enabled_recorder().recent(
        since_hours=since_hours, status=status, dialect=dialect, limit=limit
    )
    if not runs:
        console.print(f"[yellow]No runs in the last {since_hours} hours[/yellow]")
        return

    table = Table(title=f"Generate Runs (last {since_hours}h)")
    table.add_column("Run", style="cyan")
    table.add_column("Started")
    table.add_column("Engine", style="magenta")
    table.add_column("Database")
    table.add_column("Status")
    table.add_column("Models", justify="right")
    table.add_column("Duration", justify="right")

    for run in runs:
        style = _STATUS_STYLES.get(run["status"], "yellow")
        mode = " (dry run)" if run["dry_run"] else ""
        table.add_row(
            run["run_id"],
            run["started_at"][:19].replace("T", " "),
            run["dialect"] or "-",
            run["database"] or "-",
            f"[{style}]{run['status']}[/{style}]{mode}",
            str(run["models_count"] or 0),
            f"{run['duration_ms']}ms" if run["duration_ms"] is not None else "-",
        )
    console.print(table)


@app.command("stats")
def run_stats(
    since_hours: int = typer.Option(24, "--since", "-s", help="Look back this many hours"),
):
    """Summarize recent generate runs."""
    summary = _enabled_recorder().summary(since_hours)

    console.print(f"[bold]Generate runs, last {summary['since_hours']}h[/bold]")
    console.print(f"  Total runs: {summary['runs']}")
    console.print(f"  Succeeded: [green]{summary['succeeded']}[/green]")
    console.print(f"  Failed: [red]{summary['failed']}[/red]")
    if summary["avg_duration_ms"] is not None:
        console.print(f"  Average duration: {summary['avg_duration_ms']}ms")
    console.print(f"  Models generated: {summary['models']}")
    console.print(f"  References found: {summary['references_found']}")

    if summary["by_dialect"]:
        engines = Table(title="By Engine")
        engines.add_column("Engine", style="magenta")
        engines.add_column("Runs", justify="right")
        engines.add_column("Failed", justify="right", style="red")
        for row in summary["by_dialect"]:
            engines.add_row(row["dialect"] or "-", str(row["runs"]), str(row["failed"]))
        console.print(engines)

    for failure in summary["recent_failures"]:
        console.print(
            f"  [red]{failure['run_id']} {failure['error_type']}[/red]: {failure['error_message']}"
        )
