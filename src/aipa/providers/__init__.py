"""Source providers: initial source text for a Task."""

from aipa.providers.protocols import SourceProvider
from aipa.providers.templates import (
    TEMPLATES,
    UNSUPPORTED_SENTINEL_PREFIX,
    TemplateSourceProvider,
)

__all__ = [
    "SourceProvider",
    "TEMPLATES",
    "TemplateSourceProvider",
    "UNSUPPORTED_SENTINEL_PREFIX",
]
