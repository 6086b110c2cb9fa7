"""Pattern observer commands: run an analysis and inspect its results."""

import json
import logging
import sys

import click
from rich.console import Console
from rich.table import Table

logger = logging.getLogger(__name__)
console = Console()


def get_brain():
    """Get the service root lazily."""
    from second_brain.brain import get_brain
    return get_brain()


@click.command()
def run_analysis():
    """
    Run the pattern analysis now.

    Fails immediately if another analysis is running in this process.
    """
    from second_brain.patterns.observer import AnalysisInProgressError

    try:
        result = get_brain().observer.run_analysis()
    except AnalysisInProgressError as e:
        console.print(f"[yellow]{e}[/yellow]")
        sys.exit(1)
    except Exception as e:
        logger.debug("Pattern analysis failed", exc_info=True)
        console.print(f"[red]Analysis failed: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]Run {result.run_id} {result.status.value}[/green]")
    console.print(f"[bold]Notes analyzed:[/bold] {result.total_notes}")
    console.print(f"[bold]Themes found:[/bold] {result.themes_found}")

    if result.insights:
        table = Table(title="Insights")
        table.add_column("Theme", style="cyan")
        table.add_column("Period")
        table.add_column("Count", justify="right")
        table.add_column("Insight")
        for insight in result.insights:
            table.add_row(insight.theme, insight.period.value, str(insight.count), insight.insight)
        console.print(table)


@click.command()
@click.option('--history', '-n', type=int, default=1, show_default=True,
              help='Number of recent runs to show')
def status(history: int):
    """Show the most recent analysis runs."""
    runs = get_brain().pattern_store.list_runs(limit=history)

    if not runs:
        console.print("[yellow]No analysis has been run yet.[/yellow]")
        return

    table = Table(title="Analysis Runs")
    table.add_column("ID", style="cyan")
    table.add_column("Status")
    table.add_column("Notes", justify="right")
    table.add_column("Themes", justify="right")
    table.add_column("Started")
    table.add_column("Completed")
    table.add_column("Error")

    colors = {"completed": "green", "failed": "red", "running": "blue"}
    for run in runs:
        color = colors[run.status.value]
        table.add_row(
            run.id,
            f"[{color}]{run.status.value}[/{color}]",
            str(run.total_notes),
            str(run.themes_found),
            run.started_at.isoformat(timespec="seconds"),
            run.completed_at.isoformat(timespec="seconds") if run.completed_at else "-",
            run.error or "",
        )
    console.print(table)


@click.command()
def insights():
    """Show the insights of the latest completed run."""
    latest = get_brain().queries.get_latest_insights()

    if latest is None:
        console.print("[yellow]No analysis has been completed yet. Run the analyzer first.[/yellow]")
        return

    console.print(f"[bold]Run:[/bold] {latest.run.id}")
    console.print(f"[bold]Completed:[/bold] {latest.run.completed_at.isoformat(timespec='seconds')}")
    console.print(f"[bold]Notes:[/bold] {latest.run.total_notes}  [bold]Themes:[/bold] {latest.run.themes_found}")
    console.print()

    for hydrated in latest.insights:
        insight = hydrated.insight
        console.print(f"[cyan]{insight.theme}[/cyan] ({insight.period.value}, {insight.count} notes)")
        console.print(f"  {insight.insight}")
        for note in hydrated.related_notes:
            console.print(f"    - {note.title} [dim]{note.created_at.date().isoformat()}[/dim]")
        console.print()


@click.command()
@click.option('--json', 'as_json', is_flag=True, help='Print the timeline as JSON')
def timeline(as_json: bool):
    """Print the weekly tag timeline."""
    entries = get_brain().queries.get_timeline()

    if as_json:
        click.echo(json.dumps({"timeline": [entry.to_dict() for entry in entries]}, indent=2))
        return

    if not entries:
        console.print("[yellow]No notes yet.[/yellow]")
        return

    table = Table(title="Weekly Timeline")
    table.add_column("Week", style="cyan")
    table.add_column("Notes", justify="right")
    table.add_column("Tags")
    for entry in entries:
        tags = ", ".join(
            f"{tag} ({count})"
            for tag, count in sorted(entry.tags.items(), key=lambda item: -item[1])
        )
        table.add_row(f"{entry.week_start} - {entry.week_end}", str(entry.total_notes), tags)
    console.print(table)
