"""Repair channel: sources of corrected code after a failed attempt."""

from aipa.repair.interactive import InteractiveFixer, read_fix_lines
from aipa.repair.llm import LLMFixer, strip_code_fences
from aipa.repair.protocols import SourceFixer
from aipa.repair.scripted import ScriptedFixer

__all__ = [
    "InteractiveFixer",
    "LLMFixer",
    "ScriptedFixer",
    "SourceFixer",
    "read_fix_lines",
    "strip_code_fences",
]
