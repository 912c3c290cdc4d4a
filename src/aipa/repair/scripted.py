"""Scripted fixer: replays a fixed sequence of fixes."""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Iterable

from aipa.exceptions import InputClosedError

if TYPE_CHECKING:
    from aipa.models.task import Task

logger = logging.getLogger(__name__)


class ScriptedFixer:
    """Returns queued fixes in order, one per failed attempt.

    Useful for automation where fixes are known up front. Records every
    request in ``requests`` as ``(task, prior_source, error_detail)``.
    """

    def __init__(self, fixes: Iterable[str]) -> None:
        self._fixes = deque(fixes)
        self.requests: list[tuple[Task, str, str]] = []

    @property
    def remaining(self) -> int:
        return len(self._fixes)

    def collect_fix(self, task: Task, prior_source: str, error_detail: str) -> str:
        self.requests.append((task, prior_source, error_detail))
        if not self._fixes:
            raise InputClosedError("No scripted fixes left")
        fix = self._fixes.popleft()
        logger.debug("Replaying scripted fix (%d left)", len(self._fixes))
        return fix.strip()
