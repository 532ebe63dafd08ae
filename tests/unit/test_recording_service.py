"""Tests for RecordingService: upload-before-persist, signed URLs, stored transcription."""

import pytest
from botocore.exceptions import ClientError

from voicenotes.core.exceptions import (
    EmptyPayloadError,
    RecordingNotFoundError,
    SignedUrlUnavailableError,
    StorageUploadError,
)
from voicenotes.core.utils import encode_audio_payload
from voicenotes.services.recordings import RecordingService


def _client_error(op: str) -> ClientError:
    return ClientError({"Error": {"Code": "InternalError", "Message": "boom"}}, op)


@pytest.fixture
def service(repository, object_store):
    return RecordingService(repository, object_store)


class TestSaveRecording:
    async def test_uploads_then_persists(self, service, repository, s3_client):
        rec = await service.save_recording(encode_audio_payload(b"RIFF-audio"), "1:05")

        s3_client.put_object.assert_called_once()
        put_kwargs = s3_client.put_object.call_args.kwargs
        assert put_kwargs["Body"] == b"RIFF-audio"
        assert put_kwargs["Key"] == rec.audio_key
        assert rec.audio_key.startswith("recording_") and rec.audio_key.endswith(".wav")
        assert rec.duration == "1:05"
        assert (await repository.get_recording(rec.id)).audio_key == rec.audio_key

    async def test_no_row_when_upload_fails(self, service, repository, s3_client):
        """Metadata is never written for a key that failed to upload."""
        s3_client.put_object.side_effect = _client_error("PutObject")

        with pytest.raises(StorageUploadError):
            await service.save_recording(encode_audio_payload(b"RIFF-audio"), "0:03")

        assert await repository.list_recordings() == []

    async def test_empty_payload_never_uploads(self, service, s3_client):
        with pytest.raises(EmptyPayloadError):
            await service.save_recording("", "0:00")
        s3_client.put_object.assert_not_called()


class TestSignedUrls:
    async def test_list_pairs_each_recording_with_url(self, service):
        rec = await service.save_recording(encode_audio_payload(b"a"), "0:01")

        rows = await service.list_recordings()
        assert len(rows) == 1
        listed, url = rows[0]
        assert listed.id == rec.id
        assert url.startswith("https://signed.example/recording_")

    async def test_list_survives_signing_failure(self, service, s3_client):
        """Entries still list with their metadata when a URL cannot be signed."""
        rec = await service.save_recording(encode_audio_payload(b"a"), "0:01")
        s3_client.generate_presigned_url.side_effect = _client_error("GeneratePresignedUrl")

        rows = await service.list_recordings()
        assert [(r.id, url) for r, url in rows] == [(rec.id, None)]

    async def test_audio_url_unavailable(self, service, s3_client):
        rec = await service.save_recording(encode_audio_payload(b"a"), "0:01")
        s3_client.generate_presigned_url.side_effect = _client_error("GeneratePresignedUrl")

        with pytest.raises(SignedUrlUnavailableError):
            await service.audio_url(rec.id)

    async def test_audio_url_missing_recording(self, service):
        with pytest.raises(RecordingNotFoundError):
            await service.audio_url("nope")


class TestTranscribeStored:
    async def test_downloads_transcribes_and_persists(self, service, repository, mock_stt, s3_client):
        rec = await service.save_recording(encode_audio_payload(b"a"), "0:01")

        updated = await service.transcribe_stored(rec.id, mock_stt)

        s3_client.get_object.assert_called_once_with(Bucket="test-bucket", Key=rec.audio_key)
        mock_stt.transcribe_bytes.assert_awaited_once_with(b"stored-audio")
        assert updated.transcription == "We discussed the Q3 budget and approved it."
        assert (await repository.get_recording(rec.id)).transcription == updated.transcription
