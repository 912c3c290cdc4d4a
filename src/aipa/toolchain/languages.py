"""Language registry: extension and toolchain adapter per language.

The registry is the single dispatch table for languages. Anything not
registered maps to the ``txt`` extension and the UnsupportedAdapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from aipa.toolchain.adapters import (
    BytecodeAdapter,
    InterpretedAdapter,
    NativeCompiledAdapter,
    ToolchainAdapter,
    UnsupportedAdapter,
)

if TYPE_CHECKING:
    from aipa.models.config import AipaConfig
    from aipa.toolchain.process import ProcessRunner

UNSUPPORTED_EXTENSION = "txt"

# Default executables per language. A tuple names (compiler, runtime) for
# bytecode languages.
DEFAULT_EXECUTABLES: dict[str, str | tuple[str, str]] = {
    "rust": "rustc",
    "cpp": "g++",
    "c": "gcc",
    "java": ("javac", "java"),
    "python": "python3",
    "javascript": "node",
}


@dataclass(frozen=True)
class LanguageSpec:
    """A supported language: its file extension and its adapter."""

    name: str
    extension: str
    adapter: ToolchainAdapter


class LanguageRegistry:
    """Maps normalized language names to LanguageSpec entries."""

    def __init__(self, specs: list[LanguageSpec] | None = None) -> None:
        self._specs: dict[str, LanguageSpec] = {}
        self._unsupported = UnsupportedAdapter()
        for spec in specs or []:
            self.register(spec)

    def register(self, spec: LanguageSpec) -> None:
        self._specs[spec.name.strip().lower()] = spec

    def get(self, language: str) -> LanguageSpec | None:
        return self._specs.get(language.strip().lower())

    def is_supported(self, language: str) -> bool:
        return self.get(language) is not None

    def extension_for(self, language: str) -> str:
        spec = self.get(language)
        return spec.extension if spec is not None else UNSUPPORTED_EXTENSION

    def adapter_for(self, language: str) -> ToolchainAdapter:
        spec = self.get(language)
        return spec.adapter if spec is not None else self._unsupported

    def names(self) -> list[str]:
        return sorted(self._specs)


def build_registry(
    config: AipaConfig | None = None,
    runner: ProcessRunner | None = None,
) -> LanguageRegistry:
    """Build the default registry, honoring executable overrides.

    For java an override may be ``"javac"`` (compiler only) or
    ``"javac:java"`` (compiler and runtime).
    """
    overrides = dict(config.executables) if config is not None else {}
    kwargs = {
        "runner": runner,
        "timeout": config.subprocess_timeout if config is not None else None,
    }

    def exe(language: str) -> str:
        default = DEFAULT_EXECUTABLES[language]
        return overrides.get(language, default if isinstance(default, str) else default[0])

    java_compiler, java_runtime = DEFAULT_EXECUTABLES["java"]
    if "java" in overrides:
        java_compiler, _, runtime = overrides["java"].partition(":")
        java_runtime = runtime or java_runtime

    factories: dict[str, tuple[str, Callable[[], ToolchainAdapter]]] = {
        "rust": ("rs", lambda: NativeCompiledAdapter(exe("rust"), **kwargs)),
        "cpp": ("cpp", lambda: NativeCompiledAdapter(exe("cpp"), **kwargs)),
        "c": ("c", lambda: NativeCompiledAdapter(exe("c"), **kwargs)),
        "java": ("java", lambda: BytecodeAdapter(java_compiler, java_runtime, **kwargs)),
        "python": ("py", lambda: InterpretedAdapter(exe("python"), **kwargs)),
        "javascript": ("js", lambda: InterpretedAdapter(exe("javascript"), **kwargs)),
    }
    return LanguageRegistry(
        [
            LanguageSpec(name=name, extension=ext, adapter=factory())
            for name, (ext, factory) in factories.items()
        ]
    )
