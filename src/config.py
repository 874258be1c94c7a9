"""
src/config.py
==============
Runtime Configuration - Nova Voice Relay

Responsibility:
    - Hold the fixed persona prompt, model identifiers and voice settings
    - Read provider credentials and server options from the environment
    - Expose them as one immutable Settings object built at startup

This module does NOT:
    - Call any provider
    - Cache or mutate settings after construction
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Pipeline constants
# ---------------------------------------------------------------------------

MIN_AUDIO_BYTES: int = 1000
DEFAULT_FILENAME: str = "audio.webm"

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
STT_MODEL = "whisper-large-v3-turbo"
STT_LANGUAGE = "en"
STT_RESPONSE_FORMAT = "json"

CHAT_MODEL = "llama-3.1-8b-instant"
CHAT_TEMPERATURE: float = 0.7
CHAT_MAX_TOKENS: int = 100

PERSONA_PROMPT: str = (
    "You are Nova, a warm friendly AI assistant. "
    "Reply in 1-2 sentences max. Be natural."
)

# ElevenLabs "Rachel" voice
ELEVENLABS_API_BASE = "https://api.elevenlabs.io/v1"
TTS_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"
TTS_MODEL = "eleven_turbo_v2_5"
TTS_VOICE_SETTINGS: dict[str, float | bool] = {
    "stability": 0.5,
    "similarity_boost": 0.85,
    "style": 0.2,
    "use_speaker_boost": True,
}

DEFAULT_PORT: int = 8000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PROVIDER_TIMEOUT: float = 30.0


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigurationError(Exception):
    """Raised when required environment configuration is missing or invalid."""
    pass


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at startup."""

    groq_api_key: str
    elevenlabs_api_key: str | None = None

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_allow_origins: tuple[str, ...] = ("*",)
    provider_timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT

    min_audio_bytes: int = MIN_AUDIO_BYTES

    groq_base_url: str = GROQ_BASE_URL
    stt_model: str = STT_MODEL
    stt_language: str = STT_LANGUAGE
    stt_response_format: str = STT_RESPONSE_FORMAT

    chat_model: str = CHAT_MODEL
    chat_temperature: float = CHAT_TEMPERATURE
    chat_max_tokens: int = CHAT_MAX_TOKENS
    persona_prompt: str = PERSONA_PROMPT

    elevenlabs_base_url: str = ELEVENLABS_API_BASE
    tts_voice_id: str = TTS_VOICE_ID
    tts_model: str = TTS_MODEL
    # (name, value) pairs; build_payload turns them back into a dict
    tts_voice_settings: tuple[tuple[str, float | bool], ...] = tuple(
        TTS_VOICE_SETTINGS.items()
    )

    @property
    def synthesis_enabled(self) -> bool:
        return bool(self.elevenlabs_api_key)


def load_settings() -> Settings:
    """
    Build Settings from the process environment (and a .env file if present).

    Raises:
        ConfigurationError: If GROQ_API_KEY is missing, or PORT /
            PROVIDER_TIMEOUT_SECONDS are not numbers.
    """
    load_dotenv()

    groq_key = _env("GROQ_API_KEY")
    if not groq_key:
        raise ConfigurationError("GROQ_API_KEY environment variable is not set.")

    port_raw = _env("PORT") or str(DEFAULT_PORT)
    try:
        port = int(port_raw)
    except ValueError as exc:
        raise ConfigurationError(f"PORT must be a number, got '{port_raw}'.") from exc

    timeout_raw = _env("PROVIDER_TIMEOUT_SECONDS") or str(DEFAULT_PROVIDER_TIMEOUT)
    try:
        timeout = float(timeout_raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"PROVIDER_TIMEOUT_SECONDS must be a number, got '{timeout_raw}'."
        ) from exc

    return Settings(
        groq_api_key=groq_key,
        elevenlabs_api_key=_env("ELEVENLABS_API_KEY"),
        host=_env("HOST") or DEFAULT_HOST,
        port=port,
        cors_allow_origins=load_cors_origins(),
        provider_timeout_seconds=timeout,
    )


def load_cors_origins() -> tuple[str, ...]:
    """Comma-separated CORS_ALLOW_ORIGINS; '*' when unset."""
    load_dotenv()
    raw = _env("CORS_ALLOW_ORIGINS") or "*"
    return tuple(o.strip() for o in raw.split(",") if o.strip()) or ("*",)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _env(name: str) -> str | None:
    """Return a stripped environment value, treating empty strings as unset."""
    value = os.environ.get(name, "").strip()
    return value or None
