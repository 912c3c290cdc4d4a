"""Task model and artifact naming.

A Task is the (language, goal) pair that drives one attempt-retry cycle.
The goal is normalized into a filesystem-safe slug so the same Task always
maps to the same artifact name.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass

ARTIFACT_PREFIX = "project_"
MAX_SLUG_LENGTH = 64

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_-]")


def slugify_goal(goal: str) -> str:
    """Normalize a free-text goal into a filesystem-safe slug.

    ``"print hello"`` becomes ``"print_hello"``. Long goals are truncated
    and suffixed with a short digest so distinct goals stay distinct.
    """
    slug = _WHITESPACE_RE.sub("_", goal.strip())
    slug = _UNSAFE_RE.sub("_", slug).strip("_-")
    if not slug:
        return "task"
    if len(slug) > MAX_SLUG_LENGTH:
        digest = hashlib.sha256(goal.encode("utf-8")).hexdigest()[:8]
        slug = f"{slug[:MAX_SLUG_LENGTH - 9]}-{digest}"
    return slug


@dataclass(frozen=True)
class Task:
    """A target language and a natural-language goal.

    Frozen: a Task is immutable once created. ``language`` is stripped
    and lower-cased so ``"Rust"`` and ``"rust"`` dispatch identically.
    """

    language: str
    goal: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "language", self.language.strip().lower())

    @property
    def slug(self) -> str:
        return slugify_goal(self.goal)

    @property
    def artifact_stem(self) -> str:
        """File name of the source artifact without its extension."""
        return f"{ARTIFACT_PREFIX}{self.slug}"
