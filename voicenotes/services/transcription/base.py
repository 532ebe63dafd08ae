"""
Abstract base class for Speech-to-Text providers.

All STT implementations must implement this interface, enabling
provider-agnostic transcription in the service layer.
"""

from abc import ABC, abstractmethod


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe_bytes(self, audio: bytes, **kwargs) -> str:
        """Transcribe raw audio bytes to plain text.

        Args:
            audio: Encoded audio (WAV/MP3/WebM) as captured by the client.
            **kwargs: Provider-specific options.

        Returns:
            The transcript text exactly as returned by the service.

        Raises:
            TranscriptionError: On any remote or network failure.
        """

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
