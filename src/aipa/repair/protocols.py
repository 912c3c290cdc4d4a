"""Source fixer protocol.

A fixer produces replacement source after a failed attempt. The retry
controller only depends on this protocol, so interactive, model-driven
and scripted fixers are interchangeable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from aipa.models.task import Task


@runtime_checkable
class SourceFixer(Protocol):
    """Protocol for anything that can supply corrected source."""

    def collect_fix(self, task: Task, prior_source: str, error_detail: str) -> str:
        """Return replacement source for ``task``.

        Raises:
            InputClosedError: If the fix input ends before a fix is complete.
        """
        ...
