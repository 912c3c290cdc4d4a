"""Model-driven fixer backed by an OpenAI-compatible completion endpoint."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from aipa.llm.errors import LLMResponseError
from aipa.prompts.fix import FIX_SYSTEM, build_fix_prompt

if TYPE_CHECKING:
    from aipa.llm.protocols import LLMClient
    from aipa.models.task import Task

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```[\w+#.-]*[ \t]*\n(.*?)```", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Return the body of the first fenced code block, or ``text`` stripped."""
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


class LLMFixer:
    """Asks an LLM for a corrected program after each failed attempt.

    Usage::

        with OpenAIClient() as client:
            controller = RetryController(..., fixer=LLMFixer(client))
    """

    def __init__(
        self,
        client: LLMClient,
        *,
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    def collect_fix(self, task: Task, prior_source: str, error_detail: str) -> str:
        logger.debug("Requesting fix for %s (%s)", task.artifact_stem, task.language)
        reply = self._client.complete(
            FIX_SYSTEM,
            build_fix_prompt(task.language, task.goal, prior_source, error_detail),
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        fixed = strip_code_fences(reply)
        if not fixed:
            raise LLMResponseError("LLM returned an empty fix")
        return fixed
