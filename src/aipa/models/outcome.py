"""Execution outcome and attempt records.

ExecutionOutcome is produced fresh by every build-and-run invocation and
never mutated. Failure classification lives in FailureKind rather than in
exceptions: every kind here is recoverable through the repair loop.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aipa.models.task import Task


class FailureKind(str, enum.Enum):
    """Why a build-and-run attempt failed."""

    BUILD = "build"
    RUN = "run"
    ARTIFACT_MISSING = "artifact_missing"
    UNSUPPORTED = "unsupported"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ExecutionOutcome:
    """Normalized result of one build-and-run attempt.

    Attributes:
        succeeded: True when the program ran and exited with status 0.
        stdout_text: Captured standard output of the program (empty when
            the build failed before execution).
        error_detail: Captured standard error or a descriptive message on
            failure, None on success.
        failure_kind: Classification of the failure, None on success.
        exit_code: Exit status of the last process spawned, if any.
    """

    succeeded: bool
    stdout_text: str = ""
    error_detail: str | None = None
    failure_kind: FailureKind | None = None
    exit_code: int | None = None

    @classmethod
    def success(cls, stdout_text: str, exit_code: int = 0) -> ExecutionOutcome:
        return cls(succeeded=True, stdout_text=stdout_text, exit_code=exit_code)

    @classmethod
    def failure(
        cls,
        kind: FailureKind,
        detail: str | None,
        *,
        stdout_text: str = "",
        exit_code: int | None = None,
    ) -> ExecutionOutcome:
        return cls(
            succeeded=False,
            stdout_text=stdout_text,
            error_detail=detail,
            failure_kind=kind,
            exit_code=exit_code,
        )


@dataclass(frozen=True)
class AttemptRecord:
    """One execution attempt within a Task's processing.

    Frozen: attempt records are immutable history.
    """

    attempt: int
    outcome: ExecutionOutcome
    source: str


@dataclass
class CleanupReport:
    """Artifacts removed at the end of a Task, and removals that failed."""

    removed: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class TaskResult:
    """Final result of processing one Task.

    Frozen: the result is immutable once the controller returns it.
    """

    task: Task
    succeeded: bool
    message: str
    attempts: list[AttemptRecord] = field(default_factory=list)
    cleanup: CleanupReport = field(default_factory=CleanupReport)

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)

    @property
    def last_outcome(self) -> ExecutionOutcome | None:
        return self.attempts[-1].outcome if self.attempts else None
