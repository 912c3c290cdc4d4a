"""Rich formatting helpers for the AIPA CLI.

Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.text import Text

if TYPE_CHECKING:
    from aipa.models.outcome import AttemptRecord, CleanupReport, TaskResult


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_attempt(record: AttemptRecord, max_attempts: int, console: Console) -> None:
    """Report one execution attempt; successful attempts print nothing."""
    outcome = record.outcome
    if outcome.succeeded:
        return
    kind = outcome.failure_kind.value if outcome.failure_kind is not None else "failure"
    detail = (outcome.error_detail or "Unknown error").rstrip()
    console.print(
        f"[yellow]Attempt {record.attempt}/{max_attempts} failed[/yellow] "
        f"[dim]({kind})[/dim]: {escape(detail)}"
    )


def format_cleanup(report: CleanupReport, console: Console) -> None:
    """Warn about artifacts that could not be removed."""
    for error in report.errors:
        console.print(f"[yellow]Warning:[/yellow] {escape(error)}", highlight=False)


def format_result(result: TaskResult, console: Console) -> None:
    """Print the final success or failure message."""
    format_cleanup(result.cleanup, console)
    style = "green" if result.succeeded else "red"
    console.print(Text(result.message, style=style))


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
