"""Completion client behind the model-driven fixer."""

from aipa.llm.client import OpenAIClient
from aipa.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
    LLMServiceError,
)
from aipa.llm.protocols import LLMClient

__all__ = [
    "OpenAIClient",
    "LLMClient",
    "LLMClientError",
    "LLMConfigError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMServiceError",
    "LLMResponseError",
]
