"""
Transcription step: playback reference -> audio bytes -> transcript.

Only one transcription runs at a time; ``PageState.is_transcribing`` is
set for the whole call so the trigger can be disabled.  The transcript is
written to the in-memory recording first and then persisted.

Remote audio is read through the signed URL; one that has aged out, or
that storage rejects, is signed again before giving up.
"""

import logging

from voicenotes.core.exceptions import FetchError, SignedUrlUnavailableError
from voicenotes.core.utils import encode_audio_payload
from voicenotes.ui.api_client import APIClient, APIError
from voicenotes.ui.state import PageState, RecordingView

logger = logging.getLogger(__name__)

TRANSCRIBE_FAILED = "Failed to transcribe audio. Please try again."


class TranscriptionStep:
    def __init__(self, page: PageState, api: APIClient) -> None:
        self._page = page
        self._api = api

    def _sign(self, recording: RecordingView) -> str:
        try:
            url = self._api.get_audio_url(recording.id)
        except APIError as exc:
            raise SignedUrlUnavailableError(recording.id) from exc
        self._page.set_audio_url(recording.id, url)
        return url

    def _fetch_remote(self, recording: RecordingView) -> bytes:
        if recording.audio_url and not self._page.audio_url_expired(recording):
            try:
                return self._api.fetch_audio(recording.audio_url)
            except FetchError as exc:
                # Typically a lapsed signature (403); sign again once
                logger.info("Cached audio URL for %s rejected: %s", recording.id, exc.detail)
        return self._api.fetch_audio(self._sign(recording))

    def _load_audio(self, recording: RecordingView) -> bytes:
        if recording.local_url:
            blob = self._page.blobs.resolve(recording.local_url)
            if blob is not None:
                return blob.data
            logger.debug("Local audio for %s was released; using storage", recording.id)
        return self._fetch_remote(recording)

    def run(self, recording_id: str | None = None) -> str | None:
        """Transcribe a recording (the selected one by default).

        Returns the transcript, or ``None`` when nothing ran or it failed.
        """
        page = self._page
        if page.is_transcribing:
            return None
        recording = page.find(recording_id) if recording_id else page.selected
        if recording is None:
            return None

        page.is_transcribing = True
        try:
            try:
                audio = self._load_audio(recording)
                text = self._api.transcribe(encode_audio_payload(audio))
            except SignedUrlUnavailableError as exc:
                logger.warning("Audio URL unavailable for %s", recording.id)
                page.set_error(exc.detail)
                return None
            except (FetchError, APIError) as exc:
                logger.error("Transcription of %s failed: %s", recording.id, exc)
                page.set_error(TRANSCRIBE_FAILED)
                return None

            page.update_recording(recording.id, transcription=text)
            try:
                self._api.update_transcription(recording.id, text)
            except APIError as exc:
                logger.error("Failed to persist transcription for %s: %s", recording.id, exc)
                page.set_error(f"Failed to save transcription: {exc.message}")
            return text
        finally:
            page.is_transcribing = False
