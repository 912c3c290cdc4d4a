"""Tests for AipaConfig validation and workspace root resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from aipa.exceptions import ConfigError, WorkspaceEnvironmentError
from aipa.models.config import (
    DEFAULT_WORKSPACE_DIRNAME,
    MAX_ATTEMPTS,
    AipaConfig,
    default_workspace_root,
)


class TestAipaConfig:
    def test_defaults(self):
        config = AipaConfig()
        assert config.max_attempts == MAX_ATTEMPTS == 3
        assert config.fail_fast_unsupported is False
        assert config.subprocess_timeout == 120.0

    def test_zero_timeout_disables(self):
        assert AipaConfig(subprocess_timeout=0).subprocess_timeout is None

    def test_build_rejects_zero_attempts(self):
        with pytest.raises(ConfigError):
            AipaConfig.build(max_attempts=0)

    def test_build_rejects_negative_timeout(self):
        with pytest.raises(ConfigError):
            AipaConfig.build(subprocess_timeout=-1)

    def test_executable_keys_normalized(self):
        config = AipaConfig(executables={" Python ": "/usr/bin/python3"})
        assert config.executables == {"python": "/usr/bin/python3"}

    def test_explicit_workspace_root(self, tmp_path: Path):
        config = AipaConfig(workspace_root=tmp_path / "ws")
        assert config.resolved_workspace_root() == tmp_path / "ws"

    def test_relative_workspace_root_made_absolute(self, monkeypatch, tmp_path: Path):
        monkeypatch.chdir(tmp_path)
        root = AipaConfig(workspace_root=Path("ws")).resolved_workspace_root()
        assert root.is_absolute()
        assert root == Path.cwd() / "ws"

    def test_default_workspace_root_under_home(self, monkeypatch, tmp_path: Path):
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert AipaConfig().resolved_workspace_root() == tmp_path / DEFAULT_WORKSPACE_DIRNAME


class TestDefaultWorkspaceRoot:
    def test_unresolvable_home_raises(self, monkeypatch):
        def no_home(cls):
            raise RuntimeError("Could not determine home directory.")

        monkeypatch.setattr(Path, "home", classmethod(no_home))
        with pytest.raises(WorkspaceEnvironmentError, match="home directory"):
            default_workspace_root()
