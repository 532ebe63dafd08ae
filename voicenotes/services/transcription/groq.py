"""
Groq Whisper speech-to-text provider.

Posts audio as ``multipart/form-data`` to the OpenAI-compatible
``/audio/transcriptions`` endpoint hosted by Groq.  No retries: a failed
call surfaces as :class:`TranscriptionError` and the user retries by hand.
"""

import logging

import httpx

from voicenotes.core.config import get_settings
from voicenotes.core.exceptions import EmptyPayloadError, TranscriptionError
from voicenotes.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

UPLOAD_FILENAME = "audio.mp3"
UPLOAD_CONTENT_TYPE = "audio/mpeg"


class GroqWhisperSTT(BaseSTT):
    """Remote Whisper transcription over HTTP."""

    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.groq_api_key
        self._url = url or settings.transcription_url
        self._model = model or settings.transcription_model
        self._client = client or httpx.AsyncClient(timeout=timeout or settings.http_timeout)

    async def transcribe_bytes(self, audio: bytes, **kwargs) -> str:
        """Send *audio* to the transcription endpoint and return its ``text``."""
        if not audio:
            raise EmptyPayloadError("audio data")

        files = {"file": (UPLOAD_FILENAME, audio, UPLOAD_CONTENT_TYPE)}
        data = {
            "model": self._model,
            "temperature": "0",
            "response_format": "json",
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            response = await self._client.post(self._url, headers=headers, data=data, files=files)
        except httpx.HTTPError as exc:
            logger.error("Transcription request failed: %s", exc)
            raise TranscriptionError(f"Transcription request failed: {exc}") from exc

        if response.is_error:
            logger.error(
                "Transcription failed with status %s: %s",
                response.status_code,
                response.reason_phrase,
            )
            raise TranscriptionError(f"Transcription failed: {response.reason_phrase}")

        try:
            text = response.json()["text"]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Malformed transcription response: %s", exc)
            raise TranscriptionError("Transcription response had no text") from exc

        logger.info("Transcribed %d bytes of audio (%d chars)", len(audio), len(text))
        return text

    async def aclose(self) -> None:
        await self._client.aclose()
