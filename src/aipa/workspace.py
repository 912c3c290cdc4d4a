"""Workspace manager: the per-run scratch directory.

Owns where source artifacts live, how they are written and read, and
their removal together with every build artifact derived from them.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from aipa.exceptions import SourceNotFoundError, UnrecoverableIOError, WorkspaceEnvironmentError
from aipa.models.outcome import CleanupReport

if TYPE_CHECKING:
    from aipa.models.task import Task
    from aipa.toolchain.languages import LanguageRegistry

logger = logging.getLogger(__name__)


class Workspace:
    """A directory holding one source artifact per Task.

    The directory is created lazily on first write (or by an explicit
    ``ensure_workspace()``). Artifact paths are a pure function of the
    Task, so the same Task always resolves to the same file.

    Usage::

        ws = Workspace(Path("~/aipa_projects").expanduser(), build_registry())
        ws.ensure_workspace()
        ws.write_source(task, "print('hi')")
        ws.cleanup(task)
    """

    def __init__(self, root: Path, registry: LanguageRegistry) -> None:
        # Toolchains run with cwd inside the workspace; paths handed to them must be absolute
        self.root = Path(root).expanduser().absolute()
        self._registry = registry

    def ensure_workspace(self) -> Path:
        """Create the workspace directory (and parents) if absent.

        Raises:
            WorkspaceEnvironmentError: If the directory cannot be created.
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WorkspaceEnvironmentError(
                f"Cannot create workspace directory {self.root}: {exc}"
            ) from exc
        if not self.root.is_dir():
            raise WorkspaceEnvironmentError(f"Workspace path is not a directory: {self.root}")
        return self.root

    def resolve_source_path(self, task: Task) -> Path:
        extension = self._registry.extension_for(task.language)
        return self.root / f"{task.artifact_stem}.{extension}"

    def has_source(self, task: Task) -> bool:
        return self.resolve_source_path(task).is_file()

    def write_source(self, task: Task, text: str) -> Path:
        """Write ``text`` as the Task's artifact, replacing any previous one."""
        self.ensure_workspace()
        path = self.resolve_source_path(task)
        try:
            with open(path, "w", encoding="utf-8", newline="") as fh:
                fh.write(text)
                fh.flush()
                os.fsync(fh.fileno())
        except OSError as exc:
            raise UnrecoverableIOError(f"Cannot write source artifact {path}: {exc}") from exc
        logger.debug("Saved file: %s", path)
        logger.debug("Saved code:\n%s", text)
        return path

    def read_source(self, task: Task) -> str:
        """Return the Task's current source text.

        Raises:
            SourceNotFoundError: If no artifact exists for the Task.
        """
        path = self.resolve_source_path(task)
        try:
            with open(path, encoding="utf-8", newline="") as fh:
                return fh.read()
        except FileNotFoundError:
            raise SourceNotFoundError(path) from None
        except OSError as exc:
            raise UnrecoverableIOError(f"Cannot read source artifact {path}: {exc}") from exc

    def cleanup(self, task: Task) -> CleanupReport:
        """Remove the Task's source and every artifact derived from it.

        Best-effort: a failed removal is recorded in the report and
        logged, and the remaining artifacts are still removed.
        """
        report = CleanupReport()
        source = self.resolve_source_path(task)
        adapter = self._registry.adapter_for(task.language)
        for path in [source, *adapter.derived_artifacts(source)]:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                message = f"Failed to remove {path}: {exc}"
                logger.warning(message)
                report.errors.append(message)
                continue
            logger.debug("Removed artifact: %s", path)
            report.removed.append(path)
        return report
