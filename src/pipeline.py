"""
src/pipeline.py
================
Request Pipeline Orchestrator - Nova Voice Relay

Responsibility:
    Run one ask request through four strictly sequential steps:
        1. Size guard        -> skip near-empty uploads without any provider call
        2. Transcription     -> Groq Whisper; empty transcript ends the request
        3. Completion        -> Groq chat with the Nova persona
        4. Synthesis         -> ElevenLabs if configured, else empty audio

Outcome policy:
    - Size guard, empty transcript, empty reply: normal results with empty
      fields.
    - STT or chat failure: ProviderError propagates to the caller (fatal).
    - Synthesis failure or missing key: logged, audio_b64 is "" (degraded).

This layer MUST NOT:
    - Keep any state between calls
    - Retry a provider
    - Run steps concurrently; each step needs the previous step's output
"""

import base64
import logging
from dataclasses import asdict, dataclass

import aiohttp
from openai import AsyncOpenAI

from src.audio.upload import AudioUpload, is_too_small
from src.config import Settings
from src.llm.chat import complete
from src.provider_errors import ProviderError
from src.stt.groq_client import transcribe
from src.tts.elevenlabs_client import synthesize

logger = logging.getLogger("nova.pipeline")


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PipelineResult:
    """Reply text plus base64 audio; both may be empty."""

    text: str = ""
    audio_b64: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


EMPTY_RESULT = PipelineResult()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def run_pipeline(
    upload: AudioUpload,
    settings: Settings,
    chat_client: AsyncOpenAI,
    http_session: aiohttp.ClientSession,
) -> PipelineResult:
    """
    Execute the full ask pipeline for one uploaded clip.

    Args:
        upload:       The uploaded clip.
        settings:     Immutable process configuration.
        chat_client:  Shared AsyncOpenAI client (STT + chat).
        http_session: Shared aiohttp session (synthesis).

    Returns:
        PipelineResult; empty fields on the short-circuit paths.

    Raises:
        ProviderError: If transcription or completion fails.
    """
    logger.info("Received audio: %d bytes, filename: %s", upload.size, upload.filename)

    # ------------------------------------------------------------------
    # Step 1: Size guard
    # ------------------------------------------------------------------
    if is_too_small(upload, settings.min_audio_bytes):
        logger.info("Audio too small (< %d bytes), skipping.", settings.min_audio_bytes)
        return EMPTY_RESULT

    # ------------------------------------------------------------------
    # Step 2: Transcribe
    # ------------------------------------------------------------------
    user_text = await transcribe(chat_client, upload, settings)
    if not user_text:
        logger.info("No speech detected.")
        return EMPTY_RESULT
    logger.info("User said: %s", user_text)

    # ------------------------------------------------------------------
    # Step 3: Complete
    # ------------------------------------------------------------------
    reply_text = await complete(chat_client, user_text, settings)
    logger.info("AI reply: %s", reply_text)

    # ------------------------------------------------------------------
    # Step 4: Synthesize (optional)
    # ------------------------------------------------------------------
    audio_b64 = await _synthesize_or_fallback(http_session, reply_text, settings)

    return PipelineResult(text=reply_text, audio_b64=audio_b64)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


async def _synthesize_or_fallback(
    http_session: aiohttp.ClientSession,
    reply_text: str,
    settings: Settings,
) -> str:
    """Return base64 audio, or "" when synthesis is disabled or fails."""
    if not settings.synthesis_enabled:
        logger.info("No ELEVENLABS_API_KEY; caller will use its local voice.")
        return ""

    try:
        audio = await synthesize(http_session, reply_text, settings)
    except ProviderError as exc:
        logger.warning("Synthesis unavailable, falling back to local voice: %s", exc)
        return ""

    return encode_audio(audio)


def encode_audio(audio: bytes) -> str:
    """Standard base64 (with padding) for transport inside JSON."""
    return base64.b64encode(audio).decode("ascii")
