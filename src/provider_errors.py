"""
src/provider_errors.py
=======================
Provider Failure Type - Nova Voice Relay

Responsibility:
    - Define the single exception raised when an outbound provider call
      fails at the transport level, returns a non-success status, or
      returns a response that cannot be parsed

Mandatory providers (STT, chat) let it propagate to the HTTP boundary.
The optional synthesis provider's failures are caught by the pipeline and
degraded to empty audio.
"""


class ProviderError(Exception):
    """Raised when an outbound provider call fails."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider} request failed: {message}")
