# src/llm/__init__.py
# ====================
# Chat Completion Layer - Nova Voice Relay
#
# Public API:
#   complete(client, transcript, settings) -> str

from src.llm.chat import build_messages, complete  # noqa: F401

__all__ = [
    "build_messages",
    "complete",
]
