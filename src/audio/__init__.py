# src/audio/__init__.py
# ======================
# Audio Ingestion Layer - Nova Voice Relay
#
# Responsibility:
#   - Wrap uploaded clips (payload + filename + inferred MIME type)
#   - Size guard for near-empty recordings
#
# No decoding or transcoding happens here; the declared MIME type is
# passed through to the STT provider.

from src.audio.upload import AudioUpload, infer_mime_type, is_too_small  # noqa: F401

__all__ = [
    "AudioUpload",
    "infer_mime_type",
    "is_too_small",
]
