# src/stt/__init__.py
# ====================
# Speech-to-Text Layer - Nova Voice Relay
#
# Groq Whisper (whisper-large-v3-turbo) via the OpenAI-compatible API.
#
# Public API:
#   transcribe(client, upload, settings) -> str

from src.stt.groq_client import transcribe  # noqa: F401

__all__ = [
    "transcribe",
]
