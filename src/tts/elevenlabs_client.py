"""
src/tts/elevenlabs_client.py
=============================
ElevenLabs TTS Client - Nova Voice Relay

Responsibility:
    - Convert Nova's reply text to speech with a fixed voice, model and
      prosody (stability, similarity boost, style, speaker boost)
    - Return the raw audio bytes exactly as the provider sent them

Raises ProviderError on a non-success status or transport failure. The
caller decides whether that is fatal; the pipeline treats it as a degraded
outcome and falls back to empty audio.

This module does NOT:
    - Base64-encode audio (see src.pipeline)
    - Decide whether synthesis is enabled
"""

import asyncio
import logging

import aiohttp

from src.config import Settings
from src.provider_errors import ProviderError

logger = logging.getLogger("nova.tts.elevenlabs_client")

PROVIDER_NAME = "ElevenLabs"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_payload(text: str, settings: Settings) -> dict:
    return {
        "text": text,
        "model_id": settings.tts_model,
        "voice_settings": dict(settings.tts_voice_settings),
    }


async def synthesize(
    session: aiohttp.ClientSession,
    text: str,
    settings: Settings,
) -> bytes:
    """
    Synthesize `text` with the configured ElevenLabs voice.

    Args:
        session:  Shared aiohttp session.
        text:     Reply text to speak.
        settings: Must carry an ElevenLabs API key.

    Returns:
        Audio bytes (MPEG) as returned by the provider.

    Raises:
        ProviderError: On non-2xx status or transport failure.
    """
    if not settings.elevenlabs_api_key:
        raise ProviderError(PROVIDER_NAME, "ELEVENLABS_API_KEY is not configured")

    url = f"{settings.elevenlabs_base_url}/text-to-speech/{settings.tts_voice_id}"
    headers = {
        "xi-api-key": settings.elevenlabs_api_key,
        "Content-Type": "application/json",
    }

    try:
        async with session.post(
            url,
            json=build_payload(text, settings),
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=settings.provider_timeout_seconds),
        ) as resp:
            if not 200 <= resp.status < 300:
                raise ProviderError(
                    PROVIDER_NAME, f"status {resp.status}", resp.status
                )
            audio = await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise ProviderError(PROVIDER_NAME, str(exc) or type(exc).__name__) from exc

    logger.info("ElevenLabs TTS: %d bytes", len(audio))
    return audio
