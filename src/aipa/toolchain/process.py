"""Subprocess execution for toolchains.

SubprocessRunner is the single place AIPA spawns compilers, interpreters
and compiled programs. Adapters depend on the ProcessRunner protocol so
tests can substitute a fake toolchain.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from aipa.exceptions import ToolchainNotFoundError, UnrecoverableIOError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and captured streams of one finished process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


@runtime_checkable
class ProcessRunner(Protocol):
    """Protocol for anything that can run a command to completion."""

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        ...


class SubprocessRunner:
    """Run commands with ``subprocess.run``, capturing text output.

    Output is decoded leniently so a program printing invalid UTF-8 still
    yields an outcome. When ``timeout`` expires the child is killed and a
    result with ``timed_out=True`` is returned.
    """

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        args = [str(a) for a in argv]
        logger.debug("Running: %s (cwd=%s, timeout=%s)", " ".join(args), cwd, timeout)
        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=timeout,
            )
        except FileNotFoundError as exc:
            raise ToolchainNotFoundError(args[0]) from exc
        except subprocess.TimeoutExpired as exc:
            logger.debug("Timed out after %ss: %s", timeout, args[0])
            return ProcessResult(
                returncode=-1,
                stdout=_as_text(exc.stdout),
                stderr=_as_text(exc.stderr),
                timed_out=True,
            )
        except OSError as exc:
            raise UnrecoverableIOError(f"Failed to execute {args[0]}: {exc}") from exc

        logger.debug("Exit code %d from %s", completed.returncode, args[0])
        return ProcessResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def _as_text(data: str | bytes | None) -> str:
    # TimeoutExpired carries raw bytes even when text=True was requested
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
