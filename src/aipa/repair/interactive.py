"""Interactive fixer: a human types the corrected source.

Input protocol: lines are accumulated until a blank line arrives after
at least one non-blank line. Blank lines before any content do not end
the input, and lines holding nothing but the ``>`` prompt are dropped.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Iterable, TextIO

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

from aipa.exceptions import InputClosedError

if TYPE_CHECKING:
    from aipa.models.task import Task

PROMPT_DECORATION = ">"
SUBMIT_HINT = "Enter fixed code (press Enter twice to submit):"

# Pygments lexer per language identifier
_LEXERS = {
    "rust": "rust",
    "python": "python",
    "cpp": "cpp",
    "c": "c",
    "java": "java",
    "javascript": "javascript",
}


def read_fix_lines(lines: Iterable[str]) -> str:
    """Accumulate fix lines up to the terminating blank line.

    Args:
        lines: Newline-terminated lines, e.g. a text stream.

    Returns:
        The accumulated text with surrounding whitespace stripped.

    Raises:
        InputClosedError: If ``lines`` runs out before a blank line
            follows non-blank content.
    """
    collected: list[str] = []
    has_content = False
    for line in lines:
        stripped = line.strip()
        if stripped == PROMPT_DECORATION:
            continue
        if not stripped:
            if has_content:
                return "".join(collected).strip()
        else:
            has_content = True
        collected.append(line if line.endswith("\n") else line + "\n")
    raise InputClosedError()


class InteractiveFixer:
    """Shows the failure on a rich console and reads a fix from a stream.

    Args:
        console: Console for the failure report. Defaults to stdout.
        stream: Text stream to read the fix from. Defaults to stdin.
    """

    def __init__(self, console: Console | None = None, stream: TextIO | None = None) -> None:
        self._console = console or Console()
        self._stream = stream

    def collect_fix(self, task: Task, prior_source: str, error_detail: str) -> str:
        console = self._console
        console.print(
            f"[bold]Task:[/bold] {escape(task.goal)} in [cyan]{escape(task.language)}[/cyan]"
        )
        console.print(
            Panel(
                Syntax(prior_source, _LEXERS.get(task.language, "text"), line_numbers=True),
                title="Original code",
                title_align="left",
            )
        )
        console.print(Panel(escape(error_detail.rstrip()), title="Error", title_align="left", style="red"))
        console.print(SUBMIT_HINT, highlight=False)
        console.print(f"{PROMPT_DECORATION} ", end="")

        stream = self._stream if self._stream is not None else sys.stdin
        return read_fix_lines(iter(stream.readline, ""))
