# src/tts/__init__.py
# ====================
# Speech Synthesis Layer - Nova Voice Relay
#
# Optional: only used when ELEVENLABS_API_KEY is set. Failures here never
# fail a request; the pipeline falls back to empty audio.
#
# Public API:
#   synthesize(session, text, settings) -> bytes

from src.tts.elevenlabs_client import synthesize  # noqa: F401

__all__ = [
    "synthesize",
]
