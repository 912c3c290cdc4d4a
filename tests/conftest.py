"""Shared test fixtures for AIPA.

Provides an isolated workspace, a fake toolchain runner, and helpers for
building controllers without touching the user's home directory.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

from aipa.models.config import AipaConfig
from aipa.toolchain.languages import build_registry
from aipa.toolchain.process import ProcessResult
from aipa.workspace import Workspace


class FakeRunner:
    """A ProcessRunner that records calls and answers from a handler.

    The handler receives ``(argv, cwd)`` and returns a ProcessResult. It
    may create files to simulate a compiler writing its output.
    """

    def __init__(self, handler: Callable[[list[str], Path | None], ProcessResult] | None = None):
        self.calls: list[list[str]] = []
        self._handler = handler or (lambda argv, cwd: ProcessResult(returncode=0))

    def run(self, argv, *, cwd=None, timeout=None) -> ProcessResult:
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        return self._handler(argv, cwd)


def compiler_writes_output(run_stdout: str = "ok\n", run_code: int = 0, run_stderr: str = ""):
    """Handler simulating ``<cc> <src> -o <out>`` followed by running ``<out>``."""

    def handler(argv: list[str], cwd: Path | None) -> ProcessResult:
        if "-o" in argv:
            Path(argv[argv.index("-o") + 1]).write_text("binary")
            return ProcessResult(returncode=0)
        return ProcessResult(returncode=run_code, stdout=run_stdout, stderr=run_stderr)

    return handler


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    return tmp_path / "aipa_projects"


@pytest.fixture
def config(workspace_root: Path) -> AipaConfig:
    """Config pinned to a temp workspace and the running interpreter."""
    return AipaConfig(
        workspace_root=workspace_root,
        subprocess_timeout=30,
        executables={"python": sys.executable},
    )


@pytest.fixture
def registry(config: AipaConfig):
    return build_registry(config)


@pytest.fixture
def workspace(workspace_root: Path, registry) -> Workspace:
    return Workspace(workspace_root, registry)
