"""Failures talking to the completion endpoint behind the LLM fixer.

Every error here is an AipaError, so a broken endpoint ends the run with
exit status 1 instead of a traceback.
"""

from __future__ import annotations

from aipa.exceptions import AipaError


class LLMClientError(AipaError):
    """Base for completion-endpoint failures."""


class LLMConfigError(LLMClientError):
    """No API key configured for the endpoint."""


class LLMAuthError(LLMClientError):
    """The endpoint rejected the credentials (401/403). Never retried."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        super().__init__(f"Endpoint rejected credentials: HTTP {status_code} {body}".rstrip())


class LLMRateLimitError(LLMClientError):
    """HTTP 429. ``retry_after`` carries the server's Retry-After seconds."""

    def __init__(self, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        message = "Rate limited by endpoint"
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message)


class LLMServiceError(LLMClientError):
    """The endpoint failed or could not be reached.

    Attributes:
        status_code: HTTP status, or None for transport failures.
        transient: Whether another request may succeed (5xx or network).
    """

    def __init__(self, message: str, status_code: int | None = None, transient: bool = False) -> None:
        self.status_code = status_code
        self.transient = transient
        super().__init__(message)


class LLMResponseError(LLMClientError):
    """The reply carried no usable program text."""
