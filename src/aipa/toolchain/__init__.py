"""Toolchain adapters: build and run source files per language."""

from aipa.toolchain.adapters import (
    UNSUPPORTED_LANGUAGE_DETAIL,
    BytecodeAdapter,
    CompiledAdapter,
    InterpretedAdapter,
    NativeCompiledAdapter,
    ToolchainAdapter,
    UnsupportedAdapter,
)
from aipa.toolchain.languages import (
    DEFAULT_EXECUTABLES,
    LanguageRegistry,
    LanguageSpec,
    build_registry,
)
from aipa.toolchain.process import ProcessResult, ProcessRunner, SubprocessRunner

__all__ = [
    "UNSUPPORTED_LANGUAGE_DETAIL",
    "BytecodeAdapter",
    "CompiledAdapter",
    "DEFAULT_EXECUTABLES",
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
]
