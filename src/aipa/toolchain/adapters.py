"""Build-and-run adapters, one per toolchain shape.

Three shapes cover every supported language:

- NativeCompiledAdapter: compile to a native binary, then execute it.
- BytecodeAdapter: compile to a class file run by a separate runtime.
- InterpretedAdapter: hand the source straight to an interpreter.

The compiled shapes share one protocol in CompiledAdapter: remove any
stale output, compile, verify the output exists, then execute it. Build
and run failures come back as failed ExecutionOutcome values; filesystem
errors while probing artifacts raise UnrecoverableIOError.
"""

from __future__ import annotations

import abc
import logging
import os
from pathlib import Path
from typing import Sequence

from aipa.exceptions import UnrecoverableIOError
from aipa.models.outcome import ExecutionOutcome, FailureKind
from aipa.toolchain.process import ProcessResult, ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)

UNSUPPORTED_LANGUAGE_DETAIL = "unsupported language"
DEFAULT_ENTRY_POINT = "Main"


class ToolchainAdapter(abc.ABC):
    """Knows how to build (if needed) and run one language's source file."""

    supported: bool = True

    def __init__(
        self,
        *,
        runner: ProcessRunner | None = None,
        timeout: float | None = None,
    ) -> None:
        self._runner = runner or SubprocessRunner()
        self._timeout = timeout

    @abc.abstractmethod
    def build_and_run(self, source_path: Path) -> ExecutionOutcome:
        """Build and execute ``source_path``, returning a fresh outcome."""

    def derived_artifacts(self, source_path: Path) -> list[Path]:
        """Files this adapter may produce from ``source_path``."""
        return []

    def _run(self, argv: Sequence[str | Path], cwd: Path) -> ProcessResult:
        return self._runner.run([str(a) for a in argv], cwd=cwd, timeout=self._timeout)

    def _outcome_from_run(self, result: ProcessResult, what: str) -> ExecutionOutcome:
        if result.timed_out:
            return ExecutionOutcome.failure(
                FailureKind.TIMEOUT,
                f"{what} timed out after {self._timeout}s",
                stdout_text=result.stdout,
            )
        if result.returncode == 0:
            return ExecutionOutcome.success(result.stdout)
        return ExecutionOutcome.failure(
            FailureKind.RUN,
            result.stderr,
            stdout_text=result.stdout,
            exit_code=result.returncode,
        )


class InterpretedAdapter(ToolchainAdapter):
    """Single-step execution: ``<interpreter> <source>``."""

    def __init__(self, interpreter: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.interpreter = interpreter

    def build_and_run(self, source_path: Path) -> ExecutionOutcome:
        logger.debug("Interpreting %s with %s", source_path, self.interpreter)
        result = self._run([self.interpreter, source_path], cwd=source_path.parent)
        return self._outcome_from_run(result, self.interpreter)


class CompiledAdapter(ToolchainAdapter):
    """Shared compile-then-execute protocol.

    Subclasses supply only the differing parameters: where the compiler
    puts its output, the compile command, and the execute command.
    """

    def __init__(self, compiler: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.compiler = compiler

    @abc.abstractmethod
    def output_path(self, source_path: Path) -> Path:
        """Where the compiler is told to place its output."""

    @abc.abstractmethod
    def compile_argv(self, source_path: Path, output_path: Path) -> list[str | Path]:
        ...

    @abc.abstractmethod
    def run_argv(self, artifact_path: Path) -> list[str | Path]:
        ...

    def derived_artifacts(self, source_path: Path) -> list[Path]:
        return [self.output_path(source_path)]

    def build_and_run(self, source_path: Path) -> ExecutionOutcome:
        output_path = self.output_path(source_path)
        for stale in self.derived_artifacts(source_path):
            self._remove_stale(stale)

        argv = self.compile_argv(source_path, output_path)
        logger.debug("Compiling: %s", " ".join(str(a) for a in argv))
        compiled = self._run(argv, cwd=source_path.parent)
        logger.debug("Compile stdout: %s", compiled.stdout)
        logger.debug("Compile stderr: %s", compiled.stderr)

        if compiled.timed_out:
            return ExecutionOutcome.failure(
                FailureKind.TIMEOUT,
                f"{self.compiler} timed out after {self._timeout}s",
            )
        if compiled.returncode != 0:
            return ExecutionOutcome.failure(
                FailureKind.BUILD,
                compiled.stderr,
                exit_code=compiled.returncode,
            )

        if not self._exists(output_path):
            logger.debug("Build output not found at intended location: %s", output_path)
            return ExecutionOutcome.failure(
                FailureKind.ARTIFACT_MISSING,
                f"Binary not created at {output_path}",
                exit_code=compiled.returncode,
            )

        try:
            artifact = output_path.resolve(strict=True)
        except OSError as exc:
            raise UnrecoverableIOError(
                f"Cannot resolve build output {output_path}: {exc}"
            ) from exc

        logger.debug("Running: %s", artifact)
        result = self._run(self.run_argv(artifact), cwd=source_path.parent)
        return self._outcome_from_run(result, artifact.name)

    @staticmethod
    def _exists(path: Path) -> bool:
        try:
            return path.exists()
        except OSError as exc:
            raise UnrecoverableIOError(f"Cannot probe {path}: {exc}") from exc

    def _remove_stale(self, path: Path) -> None:
        # A failed compile must never silently re-run older build output
        if not self._exists(path):
            return
        try:
            path.unlink()
        except OSError as exc:
            raise UnrecoverableIOError(
                f"Cannot remove stale build output {path}: {exc}"
            ) from exc
        logger.debug("Removed old build output: %s", path)


class NativeCompiledAdapter(CompiledAdapter):
    """``<compiler> <src> -o <out>`` then execute ``<out>`` directly.

    The binary sits next to the source, named after it without extension
    (``.exe`` on Windows).
    """

    def __init__(self, compiler: str, extra_args: Sequence[str] = (), **kwargs) -> None:
        super().__init__(compiler, **kwargs)
        self.extra_args = tuple(extra_args)

    def output_path(self, source_path: Path) -> Path:
        return source_path.with_suffix(".exe" if os.name == "nt" else "")

    def compile_argv(self, source_path: Path, output_path: Path) -> list[str | Path]:
        return [self.compiler, *self.extra_args, source_path, "-o", output_path]

    def run_argv(self, artifact_path: Path) -> list[str | Path]:
        return [artifact_path]


class BytecodeAdapter(CompiledAdapter):
    """``<compiler> -d <dir> <src>`` then ``<runtime> -cp <dir> <entry>``.

    The class file is named after the fixed entry-point class, not the
    source file, so every program in a workspace compiles to the same
    ``Main.class``.
    """

    def __init__(
        self,
        compiler: str,
        runtime: str,
        entry_point: str = DEFAULT_ENTRY_POINT,
        **kwargs,
    ) -> None:
        super().__init__(compiler, **kwargs)
        self.runtime = runtime
        self.entry_point = entry_point

    def output_path(self, source_path: Path) -> Path:
        return source_path.parent / f"{self.entry_point}.class"

    def compile_argv(self, source_path: Path, output_path: Path) -> list[str | Path]:
        return [self.compiler, "-d", output_path.parent, source_path]

    def run_argv(self, artifact_path: Path) -> list[str | Path]:
        return [self.runtime, "-cp", artifact_path.parent, self.entry_point]

    def derived_artifacts(self, source_path: Path) -> list[Path]:
        # Inner and anonymous classes compile to Main$<name>.class
        inner = sorted(source_path.parent.glob(f"{self.entry_point}$*.class"))
        return [self.output_path(source_path), *inner]


class UnsupportedAdapter(ToolchainAdapter):
    """Fails immediately without touching the filesystem or spawning."""

    supported = False

    def build_and_run(self, source_path: Path) -> ExecutionOutcome:
        return ExecutionOutcome.failure(FailureKind.UNSUPPORTED, UNSUPPORTED_LANGUAGE_DETAIL)
