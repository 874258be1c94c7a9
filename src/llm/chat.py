"""
src/llm/chat.py
================
Chat Completion Client - Nova Voice Relay

Responsibility:
    - Send the transcript to the chat-completion provider as the user turn,
      behind the fixed Nova persona system prompt
    - Return the first choice's message content, trimmed

An empty reply is tolerated and returned as "".

This module does NOT:
    - Keep conversation history; every call is a single-turn exchange
    - Retry on failure
"""

import logging
from typing import Any

from openai import AsyncOpenAI

from src.config import Settings
from src.provider_errors import ProviderError

logger = logging.getLogger("nova.llm.chat")

PROVIDER_NAME = "Groq chat"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_messages(transcript: str, persona_prompt: str) -> list[dict[str, str]]:
    """Return the system + user message list for one exchange."""
    return [
        {"role": "system", "content": persona_prompt},
        {"role": "user", "content": transcript},
    ]


async def complete(
    client: AsyncOpenAI,
    transcript: str,
    settings: Settings,
) -> str:
    """
    Generate Nova's reply to a transcript.

    Args:
        client:     Shared AsyncOpenAI client pointed at the Groq base URL.
        transcript: Non-empty user transcript.
        settings:   Model, persona, sampling and timeout configuration.

    Returns:
        Trimmed reply text, possibly "".

    Raises:
        ProviderError: If the request fails or the response has no choices.
    """
    try:
        response = await client.chat.completions.create(
            model=settings.chat_model,
            messages=build_messages(transcript, settings.persona_prompt),
            temperature=settings.chat_temperature,
            max_tokens=settings.chat_max_tokens,
            timeout=settings.provider_timeout_seconds,
        )
    except Exception as exc:
        raise ProviderError(
            PROVIDER_NAME, str(exc), getattr(exc, "status_code", None)
        ) from exc

    return _extract_reply(response)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _extract_reply(response: Any) -> str:
    """Read choices[0].message.content; None content counts as empty."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as exc:
        raise ProviderError(
            PROVIDER_NAME, f"malformed completion response: {exc}"
        ) from exc

    if content is None:
        logger.warning("Completion returned no content.")
        return ""
    if not isinstance(content, str):
        raise ProviderError(
            PROVIDER_NAME, f"message content is {type(content).__name__}, expected str"
        )

    return content.strip()
