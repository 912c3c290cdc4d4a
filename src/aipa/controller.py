"""Retry controller: the attempt-retry execution loop.

Drives one Task through generate (or load), build-and-run, and bounded
repair. Recoverable failures stay inside the loop and end up in the
composed message; fatal errors (AipaError subclasses) propagate.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Callable

from aipa.models.config import AipaConfig
from aipa.models.outcome import AttemptRecord, CleanupReport, FailureKind, TaskResult

if TYPE_CHECKING:
    from aipa.models.outcome import ExecutionOutcome
    from aipa.models.task import Task
    from aipa.providers.protocols import SourceProvider
    from aipa.repair.protocols import SourceFixer
    from aipa.toolchain.languages import LanguageRegistry
    from aipa.workspace import Workspace

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"


class ControllerState(str, enum.Enum):
    """States of the retry controller for the Task being processed."""

    START = "start"
    LOADED = "loaded"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    AWAITING_REPAIR = "awaiting_repair"
    EXHAUSTED = "exhausted"
    DONE = "done"


class RetryController:
    """Runs the generate, build-and-run, repair loop for one Task at a time.

    An artifact already present in the workspace is treated as a prior
    attempt and executed as-is instead of being regenerated. After the
    loop ends in success or exhaustion, the Task's artifacts are removed.
    Fatal errors skip cleanup, so the last written attempt survives for
    the next run.

    Usage::

        controller = RetryController(workspace, TemplateSourceProvider(),
                                     registry, InteractiveFixer())
        result = controller.process_task(Task("python", "print hello"))
        print(result.message)
    """

    def __init__(
        self,
        workspace: Workspace,
        provider: SourceProvider,
        registry: LanguageRegistry,
        fixer: SourceFixer,
        config: AipaConfig | None = None,
        on_attempt: Callable[[AttemptRecord], None] | None = None,
    ) -> None:
        self._workspace = workspace
        self._provider = provider
        self._registry = registry
        self._fixer = fixer
        self._config = config or AipaConfig()
        self._on_attempt = on_attempt
        self._state = ControllerState.START

    @property
    def state(self) -> ControllerState:
        """Return the current controller state."""
        return self._state

    @property
    def max_attempts(self) -> int:
        return self._config.max_attempts

    def process_task(self, task: Task) -> TaskResult:
        """Process ``task`` to success or exhaustion.

        Returns:
            TaskResult whose ``message`` is ``Success! Output: ...`` or
            ``Error after N attempts: ...``.

        Raises:
            UnrecoverableIOError: On filesystem or process spawn failures.
            InputClosedError: If the fixer's input ends early.
        """
        self._state = ControllerState.START
        code = self._load_or_generate(task)
        self._state = ControllerState.LOADED

        adapter = self._registry.adapter_for(task.language)
        source_path = self._workspace.resolve_source_path(task)
        attempts: list[AttemptRecord] = []
        max_attempts = self.max_attempts

        for attempt in range(1, max_attempts + 1):
            self._state = ControllerState.EXECUTING
            outcome = adapter.build_and_run(source_path)
            record = AttemptRecord(attempt=attempt, outcome=outcome, source=code)
            attempts.append(record)
            if self._on_attempt is not None:
                self._on_attempt(record)

            if outcome.succeeded:
                self._state = ControllerState.SUCCEEDED
                return self._finish(task, True, f"Success! Output: {outcome.stdout_text}", attempts)

            error = last_error(outcome)
            logger.info("Attempt %d/%d failed: %s", attempt, max_attempts, error)

            if outcome.failure_kind is FailureKind.UNSUPPORTED and self._config.fail_fast_unsupported:
                self._state = ControllerState.EXHAUSTED
                return self._finish(
                    task,
                    False,
                    f"Error: unsupported language '{task.language}'",
                    attempts,
                )

            if attempt == max_attempts:
                self._state = ControllerState.EXHAUSTED
                return self._finish(
                    task,
                    False,
                    f"Error after {max_attempts} attempts: {error}",
                    attempts,
                )

            self._state = ControllerState.AWAITING_REPAIR
            code = self._fixer.collect_fix(task, code, error)
            self._workspace.write_source(task, code)
            self._state = ControllerState.LOADED

        raise AssertionError("retry loop exited without a terminal state")

    def _load_or_generate(self, task: Task) -> str:
        if self._workspace.has_source(task):
            logger.info("Resuming from existing artifact for %s", task.artifact_stem)
            return self._workspace.read_source(task)
        code = self._provider.generate(task)
        self._workspace.write_source(task, code)
        return code

    def _finish(
        self,
        task: Task,
        succeeded: bool,
        message: str,
        attempts: list[AttemptRecord],
    ) -> TaskResult:
        cleanup = self._cleanup(task)
        self._state = ControllerState.DONE
        return TaskResult(
            task=task,
            succeeded=succeeded,
            message=message,
            attempts=attempts,
            cleanup=cleanup,
        )

    def _cleanup(self, task: Task) -> CleanupReport:
        report = self._workspace.cleanup(task)
        if report.errors:
            logger.warning(
                "Cleanup for %s left %d artifact(s) behind",
                task.artifact_stem,
                len(report.errors),
            )
        return report


def last_error(outcome: ExecutionOutcome) -> str:
    """Return the outcome's error detail or the unknown-error placeholder."""
    return outcome.error_detail or UNKNOWN_ERROR
