"""
Rendering functions for pluginpub output.

This module handles all human-facing messages. They go to stderr so that
stdout only carries data (the pull request URL). Interpolated text is
escaped, so commit subjects like "[feat] ..." print literally.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box
from typing import Optional

from .domain.commit import CommitDescriptor
from .domain.replay import ReplayStatus, ReplaySummary

console = Console(stderr=True, highlight=False)


def info(message: str) -> None:
    console.print(f"[cyan]{escape(message)}[/cyan]")


def success(message: str) -> None:
    console.print(f"[green]✓ {escape(message)}[/green]")


def warning(message: str) -> None:
    console.print(f"[yellow]⚠ {escape(message)}[/yellow]")


def error(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")


def render_device_code(user_code: str, verification_uri: str) -> None:
    """Show the code the user must enter in the browser."""
    console.print(Panel(
        f"[bold green]{escape(user_code)}[/bold green]",
        title="Enter this code in your browser",
        box=box.ROUNDED,
        expand=False,
    ))
    console.print(f"[yellow]Verification URL: {escape(verification_uri)}[/yellow]")


def render_manual_open(url: str) -> None:
    console.print("[yellow]Could not open a browser. Please visit:[/yellow]")
    console.print(f"[cyan]{escape(url)}[/cyan]")


def render_replay_progress(index: int, total: int, commit: CommitDescriptor) -> None:
    console.print(f"[cyan]  ({index}/{total}) {escape(commit.subject)}[/cyan]")


def render_replay_summary(summary: ReplaySummary, title: Optional[str] = None) -> None:
    """Render per-commit replay outcomes as a table."""
    if not summary.steps:
        console.print("[yellow]No commits to replay.[/yellow]")
        return

    table = Table(
        title=title or f"Replay of {escape(summary.plugin_name)}",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Commit", style="dim")
    table.add_column("Message", style="cyan")
    table.add_column("Result")

    for step in summary.steps:
        if step.status == ReplayStatus.COMMITTED:
            result = "[green]committed[/green]"
        elif step.reason:
            result = f"[yellow]skipped[/yellow] ({escape(step.reason)})"
        else:
            result = "[yellow]skipped[/yellow]"
        table.add_row(step.commit.short_hash, escape(step.commit.subject), result)

    console.print(table)
    console.print(
        f"{summary.committed} committed, {summary.skipped} skipped, {summary.total} total"
    )
