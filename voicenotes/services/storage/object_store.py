"""
S3 object storage gateway.

Stores raw recording bytes under a generated key and hands out
time-limited signed URLs for playback.  The boto3 client is built
explicitly (``S3ObjectStore.from_settings()``) and injected where needed;
there is no module-level client.

boto3 is synchronous, so async callers should wrap these methods in
``asyncio.to_thread``.
"""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from voicenotes.core.config import get_settings
from voicenotes.core.exceptions import EmptyPayloadError, VoiceNotesError

logger = logging.getLogger(__name__)


class S3ObjectStore:
    """Thin wrapper over an S3 client bound to a single bucket.

    Args:
        client: A boto3 S3 client (or a stubbed one in tests).
        bucket: Bucket name holding the recordings.
        expires_in: Signed URL lifetime in seconds.
    """

    def __init__(self, client, bucket: str, expires_in: int = 3600) -> None:
        self._client = client
        self._bucket = bucket
        self._expires_in = expires_in

    @classmethod
    def from_settings(cls) -> "S3ObjectStore":
        """Build a store from the application settings."""
        settings = get_settings()
        client = boto3.client(
            "s3",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id or None,
            aws_secret_access_key=settings.aws_secret_access_key or None,
        )
        return cls(client, settings.s3_bucket, settings.signed_url_expiry)

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def expires_in(self) -> int:
        return self._expires_in

    def upload(self, data: bytes, key: str, content_type: str = "audio/wav") -> bool:
        """Put *data* under *key*.

        Returns:
            ``True`` once S3 acknowledged the object, ``False`` on any S3 error.

        Raises:
            EmptyPayloadError: If *data* or *key* is empty.
        """
        if not data:
            raise EmptyPayloadError("audio data")
        if not key:
            raise EmptyPayloadError("storage key")
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Error uploading %s to s3://%s: %s", key, self._bucket, exc)
            return False
        logger.info("Uploaded %s (%d bytes) to s3://%s", key, len(data), self._bucket)
        return True

    def get_signed_url(self, key: str) -> str | None:
        """Return a presigned GET URL for *key*, or ``None`` if signing failed.

        ``None`` means "retry later", not a permanent failure.
        """
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=self._expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Error generating signed URL for %s: %s", key, exc)
            return None

    def download(self, key: str) -> bytes:
        """Return the stored bytes for *key*.

        Raises:
            VoiceNotesError: ``AUDIO_NOT_FOUND`` if the object cannot be read.
        """
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            return response["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            logger.error("Error downloading %s from s3://%s: %s", key, self._bucket, exc)
            raise VoiceNotesError(
                detail=f"Audio object not readable: {key}",
                code="AUDIO_NOT_FOUND",
                status_code=404,
            ) from exc
