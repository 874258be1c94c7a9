"""
src/audio/upload.py
====================
Audio Upload Ingestion - Nova Voice Relay

Responsibility:
    - Wrap the uploaded payload and its declared filename
    - Infer the MIME type from the filename extension
    - Decide whether a payload is large enough to be worth transcribing

This module does NOT:
    - Decode, resample or transcode audio
    - Call any provider
"""

from dataclasses import dataclass, field

from src.config import DEFAULT_FILENAME, MIN_AUDIO_BYTES


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_MIME_TYPE = "audio/webm"

_MIME_TYPES: dict[str, str] = {
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".mp4": "audio/mp4",
    ".m4a": "audio/mp4",
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
}


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AudioUpload:
    """One uploaded clip. Lives only for the duration of a request."""

    payload: bytes
    filename: str = DEFAULT_FILENAME
    mime_type: str = field(init=False)

    def __post_init__(self):
        # A blank filename falls back to the default before MIME inference
        if not self.filename:
            object.__setattr__(self, "filename", DEFAULT_FILENAME)
        object.__setattr__(self, "mime_type", infer_mime_type(self.filename))

    @property
    def size(self) -> int:
        return len(self.payload)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def infer_mime_type(filename: str) -> str:
    """
    Map a filename to one of the supported audio MIME types.

    Unrecognised or missing extensions map to audio/webm, the format
    browsers record by default.
    """
    return _MIME_TYPES.get(_extract_extension(filename), DEFAULT_MIME_TYPE)


def is_too_small(upload: AudioUpload, min_bytes: int = MIN_AUDIO_BYTES) -> bool:
    """Return True for near-empty recordings (silence, accidental taps)."""
    return upload.size < min_bytes


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _extract_extension(filename: str) -> str:
    """Return lowercase file extension including the dot, e.g. '.ogg'."""
    if not filename:
        return ""
    dot_index = filename.rfind(".")
    if dot_index == -1:
        return ""
    return filename[dot_index:].lower()
