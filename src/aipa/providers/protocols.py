"""Source provider protocol.

A source provider turns a Task into initial source text. Providers must
not fail for unsupported languages: they return sentinel text and let the
toolchain adapter reject the language.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from aipa.models.task import Task


@runtime_checkable
class SourceProvider(Protocol):
    """Protocol for pluggable code generators."""

    def generate(self, task: Task) -> str:
        """Return initial source text for ``task``."""
        ...
