"""Configuration models for AIPA.

AipaConfig holds per-run settings. The workspace root is explicit
configuration rather than discovered implicitly, so tests and callers can
point a run at an isolated directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from aipa.exceptions import ConfigError, WorkspaceEnvironmentError

DEFAULT_WORKSPACE_DIRNAME = "aipa_projects"
MAX_ATTEMPTS = 3
DEFAULT_SUBPROCESS_TIMEOUT = 120.0


def default_workspace_root() -> Path:
    """Return ``~/aipa_projects``.

    Raises:
        WorkspaceEnvironmentError: If the home directory cannot be resolved.
    """
    try:
        home = Path.home()
    except (RuntimeError, KeyError, OSError) as exc:
        raise WorkspaceEnvironmentError(
            f"Could not find home directory: {exc}"
        ) from exc
    return home / DEFAULT_WORKSPACE_DIRNAME


class AipaConfig(BaseModel):
    """Per-run configuration.

    Attributes:
        workspace_root: Directory holding source and build artifacts.
            None means ``~/aipa_projects``.
        max_attempts: Execution attempts per Task before giving up.
        subprocess_timeout: Wall-clock limit in seconds for each compiler,
            interpreter or program process. None disables the limit.
        fail_fast_unsupported: Stop after the first attempt when the
            language is unsupported instead of consuming the retry budget.
        executables: Per-language executable overrides, e.g.
            ``{"python": "/usr/bin/python3", "java": "javac"}``.
    """

    model_config = {"frozen": True}

    workspace_root: Optional[Path] = None
    max_attempts: int = Field(default=MAX_ATTEMPTS, ge=1)
    subprocess_timeout: Optional[float] = DEFAULT_SUBPROCESS_TIMEOUT
    fail_fast_unsupported: bool = False
    executables: dict[str, str] = Field(default_factory=dict)

    @field_validator("subprocess_timeout")
    @classmethod
    def _zero_disables_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is None or value == 0:
            return None
        if value < 0:
            raise ValueError("subprocess_timeout must be positive")
        return value

    @field_validator("executables")
    @classmethod
    def _normalize_languages(cls, value: dict[str, str]) -> dict[str, str]:
        return {lang.strip().lower(): exe for lang, exe in value.items()}

    @classmethod
    def build(cls, **kwargs: object) -> AipaConfig:
        """Validate keyword settings, converting failures to ConfigError."""
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc

    def resolved_workspace_root(self) -> Path:
        """Return the absolute workspace root, or the home default."""
        if self.workspace_root is not None:
            return self.workspace_root.expanduser().absolute()
        return default_workspace_root()
