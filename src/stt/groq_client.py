"""
src/stt/groq_client.py
=======================
Groq Whisper STT Client - Nova Voice Relay

Responsibility:
    - Send one uploaded clip to Groq's OpenAI-compatible transcription
      endpoint (whisper-large-v3-turbo)
    - Return the transcript text, trimmed

An empty transcript is a normal result ("no speech detected") and is
returned as "". Any transport failure, error status, or response without a
text field raises ProviderError.

This module does NOT:
    - Decide what happens after an empty transcript (see src.pipeline)
    - Transcode audio; the declared MIME type is passed through as-is
"""

import logging

from openai import AsyncOpenAI

from src.audio.upload import AudioUpload
from src.config import Settings
from src.provider_errors import ProviderError

logger = logging.getLogger("nova.stt.groq_client")

PROVIDER_NAME = "Groq Whisper"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def transcribe(
    client: AsyncOpenAI,
    upload: AudioUpload,
    settings: Settings,
) -> str:
    """
    Transcribe an uploaded clip.

    Args:
        client:   Shared AsyncOpenAI client pointed at the Groq base URL.
        upload:   The uploaded clip (payload, filename, MIME type).
        settings: Model, language and timeout configuration.

    Returns:
        Trimmed transcript text, possibly "".

    Raises:
        ProviderError: If the request fails or the response has no text.
    """
    logger.debug(
        "Sending %d bytes (%s) to %s...", upload.size, upload.mime_type, settings.stt_model,
    )

    try:
        response = await client.audio.transcriptions.create(
            model=settings.stt_model,
            file=(upload.filename, upload.payload, upload.mime_type),
            language=settings.stt_language,
            response_format=settings.stt_response_format,
            timeout=settings.provider_timeout_seconds,
        )
    except Exception as exc:
        raise ProviderError(
            PROVIDER_NAME, str(exc), getattr(exc, "status_code", None)
        ) from exc

    return _extract_text(response)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _extract_text(response) -> str:
    """Pull the `text` field out of a transcription response (object or dict)."""
    if isinstance(response, dict):
        text = response.get("text")
    else:
        text = getattr(response, "text", None)

    if not isinstance(text, str):
        raise ProviderError(PROVIDER_NAME, "response has no 'text' field")

    return text.strip()
