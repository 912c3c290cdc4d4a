"""Completion client for the model-driven fixer.

Talks to any OpenAI-compatible ``/chat/completions`` endpoint. One call,
``complete(system, prompt)``, sends a system/user pair and returns the
assistant's text. Transient failures are retried with tenacity; a 429
waits for the server's Retry-After when it sends one.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import httpx
import tenacity

from aipa.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
    LLMServiceError,
)

logger = logging.getLogger(__name__)

API_KEY_ENV = "AIPA_OPENAI_API_KEY"
BASE_URL_ENV = "AIPA_OPENAI_BASE_URL"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
MAX_RETRY_WAIT = 30.0

_BACKOFF = tenacity.wait_exponential(multiplier=1, min=1, max=MAX_RETRY_WAIT) + tenacity.wait_random(0, 2)


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, LLMRateLimitError):
        return True
    return isinstance(exc, LLMServiceError) and exc.transient


def _retry_after(response: httpx.Response) -> float | None:
    try:
        return float(response.headers["Retry-After"])
    except (KeyError, ValueError):
        return None


def _reply_text(data: Any) -> str:
    try:
        return data["choices"][0]["message"].get("content") or ""
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise LLMResponseError(f"Unexpected completion format: {data!r}") from exc


class OpenAIClient:
    """Sync httpx client for an OpenAI-compatible completion endpoint.

    Credentials come from the constructor or the AIPA_OPENAI_API_KEY and
    AIPA_OPENAI_BASE_URL environment variables.

    Usage::

        with OpenAIClient() as client:
            text = client.complete(FIX_SYSTEM, prompt, temperature=0.0)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float = 120.0,
        max_retries: int = 3,
    ) -> None:
        self._api_key = api_key or os.environ.get(API_KEY_ENV, "")
        if not self._api_key:
            raise LLMConfigError(
                f"No API key for the llm fixer. Pass api_key= or set {API_KEY_ENV}."
            )
        self._base_url = (base_url or os.environ.get(BASE_URL_ENV, DEFAULT_BASE_URL)).rstrip("/")
        self._model = model or DEFAULT_MODEL
        self._max_retries = max_retries
        self._sleep = time.sleep
        self._client = httpx.Client(
            timeout=timeout,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )

    def complete(
        self,
        system: str,
        prompt: str,
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send one system/user exchange and return the assistant's text.

        Raises:
            LLMAuthError: On 401/403.
            LLMRateLimitError: On 429 once retries are exhausted.
            LLMServiceError: On other HTTP errors or an unreachable endpoint.
            LLMResponseError: If the reply has no recognizable content.
        """
        payload: dict[str, Any] = {
            "model": model or self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception(_is_transient),
            wait=self._wait,
            stop=tenacity.stop_after_attempt(self._max_retries),
            sleep=self._sleep,
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return _reply_text(retryer(self._post, payload))

    def _wait(self, retry_state: tenacity.RetryCallState) -> float:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, LLMRateLimitError) and exc.retry_after is not None:
            return min(exc.retry_after, MAX_RETRY_WAIT)
        return _BACKOFF(retry_state)

    def _post(self, payload: dict[str, Any]) -> Any:
        url = f"{self._base_url}/chat/completions"
        try:
            response = self._client.post(url, json=payload)
        except httpx.TransportError as exc:
            raise LLMServiceError(f"Cannot reach {url}: {exc}", transient=True) from exc

        status = response.status_code
        if status in (401, 403):
            raise LLMAuthError(status, response.text)
        if status == 429:
            raise LLMRateLimitError(_retry_after(response))
        if status >= 400:
            raise LLMServiceError(
                f"Endpoint returned HTTP {status}: {response.text}",
                status_code=status,
                transient=status >= 500,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise LLMResponseError(f"Endpoint returned non-JSON body: {response.text[:200]}") from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> OpenAIClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
