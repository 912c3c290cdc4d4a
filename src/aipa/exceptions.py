"""AIPA exception hierarchy.

All AIPA-specific exceptions inherit from AipaError. Every exception in
this module is fatal for the current run; recoverable build and run
failures are reported as failed ExecutionOutcome values instead.
"""

from __future__ import annotations

from pathlib import Path


class AipaError(Exception):
    """Base exception for all AIPA errors."""


class ConfigError(AipaError):
    """Raised when configuration values are invalid."""


class WorkspaceEnvironmentError(AipaError):
    """Raised when the workspace directory cannot be resolved or created.

    Named WorkspaceEnvironmentError (not EnvironmentError) to avoid
    shadowing the builtin alias of OSError.
    """


class SourceNotFoundError(AipaError):
    """Raised when reading a source artifact that does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Source artifact not found: {path}")


class UnrecoverableIOError(AipaError):
    """Raised when a filesystem probe or process spawn fails mid-pipeline.

    Distinct from a build or run failure: retrying with new source
    cannot fix it, so it aborts the run.
    """


class ToolchainNotFoundError(UnrecoverableIOError):
    """Raised when a compiler, interpreter or runtime executable is missing."""

    def __init__(self, executable: str) -> None:
        self.executable = executable
        super().__init__(
            f"Toolchain executable not found: {executable!r}. "
            f"Install it or point AIPA at it with --exe."
        )


class InputClosedError(AipaError):
    """Raised when fix input ends before a terminating blank line."""

    def __init__(self, message: str = "Input closed before fixed code was submitted") -> None:
        super().__init__(message)
