"""Prompts for the model-driven fixer."""

from __future__ import annotations

FIX_SYSTEM = """You repair small programs that failed to compile or run.
You are given the target language, the program's goal, the failing source and the error output.
Reply with the complete corrected program only, in a single fenced code block.
Do not explain the fix. Do not read input or take command-line arguments."""


def build_fix_prompt(
    language: str,
    goal: str,
    prior_source: str,
    error_detail: str,
) -> str:
    """Build the user prompt asking for a corrected program.

    Args:
        language: Target language identifier.
        goal: Natural-language goal of the program.
        prior_source: The source text that failed.
        error_detail: Captured error output of the failed attempt.

    Returns:
        The formatted user prompt string.
    """
    return (
        f"Language: {language}\n"
        f"Goal: {goal}\n\n"
        f"Source:\n```{language}\n{prior_source}\n```\n\n"
        f"Error:\n```\n{error_detail.strip()}\n```"
    )
