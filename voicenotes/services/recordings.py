"""
Recording save / list / transcribe orchestration.

Ties the object storage gateway to the persistence gateway.  Saving always
uploads first and only writes metadata once the upload reported success,
so a row never points at a key that failed to upload.
"""

import asyncio
import logging

from voicenotes.core.exceptions import SignedUrlUnavailableError, StorageUploadError
from voicenotes.core.utils import decode_audio_payload, generate_audio_key
from voicenotes.services.storage.models_db import Recording
from voicenotes.services.storage.object_store import S3ObjectStore
from voicenotes.services.storage.repository import RecordingRepository
from voicenotes.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class RecordingService:
    """Storage + persistence operations on recordings.

    Args:
        repository: Repository bound to the current session.
        store: Object storage gateway.
    """

    def __init__(self, repository: RecordingRepository, store: S3ObjectStore) -> None:
        self._repo = repository
        self._store = store

    async def save_recording(self, audio_base64: str, duration: str) -> Recording:
        """Upload the decoded audio, then persist its metadata.

        Raises:
            EmptyPayloadError / InvalidPayloadError: For an unusable payload.
            StorageUploadError: If the object store rejected the upload.
        """
        audio = decode_audio_payload(audio_base64)
        key = generate_audio_key()

        uploaded = await asyncio.to_thread(self._store.upload, audio, key)
        if not uploaded:
            raise StorageUploadError(key)

        recording = await self._repo.create_recording(audio_key=key, duration=duration)
        logger.info("Saved recording %s (%s) as %s", recording.id, duration, key)
        return recording

    async def signed_url(self, recording: Recording) -> str | None:
        """Fresh playback URL for *recording*; ``None`` when signing failed."""
        return await asyncio.to_thread(self._store.get_signed_url, recording.audio_key)

    async def list_recordings(
        self, search: str | None = None
    ) -> list[tuple[Recording, str | None]]:
        """Recordings newest first, each paired with a freshly signed URL."""
        recordings = await self._repo.list_recordings(search=search)
        urls = await asyncio.gather(*(self.signed_url(r) for r in recordings))
        return list(zip(recordings, urls, strict=True))

    async def get_recording(self, recording_id: str) -> Recording:
        return await self._repo.get_recording(recording_id)

    async def audio_url(self, recording_id: str) -> str:
        """Signed URL for one recording.

        Raises:
            RecordingNotFoundError: If the recording does not exist.
            SignedUrlUnavailableError: If signing failed; retry later.
        """
        recording = await self._repo.get_recording(recording_id)
        url = await self.signed_url(recording)
        if url is None:
            raise SignedUrlUnavailableError(recording_id)
        return url

    async def transcribe_stored(self, recording_id: str, stt: BaseSTT) -> Recording:
        """Transcribe a recording straight from storage and persist the text."""
        recording = await self._repo.get_recording(recording_id)
        audio = await asyncio.to_thread(self._store.download, recording.audio_key)
        text = await stt.transcribe_bytes(audio)
        return await self._repo.update_transcription(recording_id, text)
