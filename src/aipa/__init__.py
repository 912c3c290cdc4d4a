"""AIPA: AI Programming Agent.

Turns a (language, goal) task into a program, builds and runs it with the
language's toolchain, and drives a bounded repair loop when it fails.
"""

from aipa._version import __version__

# Core entry point
from aipa.controller import ControllerState, RetryController

# Models
from aipa.models.config import AipaConfig, MAX_ATTEMPTS, default_workspace_root
from aipa.models.outcome import (
    AttemptRecord,
    CleanupReport,
    ExecutionOutcome,
    FailureKind,
    TaskResult,
)
from aipa.models.task import Task, slugify_goal

# Workspace
from aipa.workspace import Workspace

# Source providers
from aipa.providers import SourceProvider, TemplateSourceProvider

# Toolchains
from aipa.toolchain import (
    BytecodeAdapter,
    InterpretedAdapter,
    LanguageRegistry,
    LanguageSpec,
    NativeCompiledAdapter,
    ProcessResult,
    ProcessRunner,
    SubprocessRunner,
    ToolchainAdapter,
    UnsupportedAdapter,
    build_registry,
)

# Repair channel
from aipa.repair import InteractiveFixer, LLMFixer, ScriptedFixer, SourceFixer, read_fix_lines

# Exceptions
from aipa.exceptions import (
    AipaError,
    ConfigError,
    InputClosedError,
    SourceNotFoundError,
    ToolchainNotFoundError,
    UnrecoverableIOError,
    WorkspaceEnvironmentError,
)

__all__ = [
    "__version__",
    # Core
    "ControllerState",
    "RetryController",
    # Models
    "AipaConfig",
    "AttemptRecord",
    "CleanupReport",
    "ExecutionOutcome",
    "FailureKind",
    "MAX_ATTEMPTS",
    "Task",
    "TaskResult",
    "default_workspace_root",
    "slugify_goal",
    # Workspace
    "Workspace",
    # Source providers
    "SourceProvider",
    "TemplateSourceProvider",
    # Toolchains
    "BytecodeAdapter",
    "InterpretedAdapter",
    "LanguageRegistry",
    "LanguageSpec",
    "NativeCompiledAdapter",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    "ToolchainAdapter",
    "UnsupportedAdapter",
    "build_registry",
    # Repair channel
    "InteractiveFixer",
    "LLMFixer",
    "ScriptedFixer",
    "SourceFixer",
    "read_fix_lines",
    # Exceptions
    "AipaError",
    "ConfigError",
    "InputClosedError",
    "SourceNotFoundError",
    "ToolchainNotFoundError",
    "UnrecoverableIOError",
    "WorkspaceEnvironmentError",
]
