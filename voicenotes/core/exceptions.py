"""
Voice Notes AI exception hierarchy.

All application-specific exceptions inherit from VoiceNotesError,
enabling centralized error handling in the API middleware layer and a
single error string in the UI.
"""

from datetime import UTC, datetime


class VoiceNotesError(Exception):
    """Base exception for all Voice Notes AI errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "VOICENOTES_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class RecordingNotFoundError(VoiceNotesError):
    """Raised when a recording ID does not exist."""

    def __init__(self, recording_id: str) -> None:
        super().__init__(
            detail=f"Recording not found: {recording_id}",
            code="RECORDING_NOT_FOUND",
            status_code=404,
        )


class EmptyPayloadError(VoiceNotesError):
    """Raised when a gateway receives an empty payload."""

    def __init__(self, what: str = "payload") -> None:
        super().__init__(
            detail=f"Empty {what}",
            code="EMPTY_PAYLOAD",
            status_code=400,
        )


class InvalidPayloadError(VoiceNotesError):
    """Raised when a payload cannot be decoded or fails validation."""

    def __init__(self, detail: str = "Invalid payload") -> None:
        super().__init__(detail=detail, code="INVALID_PAYLOAD", status_code=400)


class StorageUploadError(VoiceNotesError):
    """Raised when the object store did not accept an upload."""

    def __init__(self, key: str) -> None:
        super().__init__(
            detail=f"Failed to upload audio to storage: {key}",
            code="STORAGE_UPLOAD_FAILED",
            status_code=502,
        )


class SignedUrlUnavailableError(VoiceNotesError):
    """Raised when a playback URL could not be signed. Callers should retry later."""

    def __init__(self, recording_id: str) -> None:
        super().__init__(
            detail=f"Audio URL unavailable for recording {recording_id}, retry later",
            code="AUDIO_URL_UNAVAILABLE",
            status_code=503,
        )


class PersistenceError(VoiceNotesError):
    """Raised when a database write fails."""

    def __init__(self, detail: str = "Failed to write to the database") -> None:
        super().__init__(detail=detail, code="PERSISTENCE_ERROR", status_code=500)


class TranscriptionError(VoiceNotesError):
    """Raised when the speech-to-text service fails."""

    def __init__(self, detail: str = "Transcription failed") -> None:
        super().__init__(
            detail=detail,
            code="TRANSCRIPTION_ERROR",
            status_code=502,
        )


class ChatError(VoiceNotesError):
    """Raised when the chat-completion service fails."""

    def __init__(self, detail: str = "Chat request failed") -> None:
        super().__init__(detail=detail, code="CHAT_ERROR", status_code=502)


# ---------------------------------------------------------------------------
# Client-side (UI workflow) errors
# ---------------------------------------------------------------------------


class FetchError(VoiceNotesError):
    """Raised when the audio bytes behind a playback URL cannot be fetched."""

    def __init__(self, detail: str = "Failed to fetch audio") -> None:
        super().__init__(detail=detail, code="FETCH_ERROR", status_code=502)


class DeviceUnavailableError(VoiceNotesError):
    """Raised when no capture device is available to record from."""

    def __init__(self, detail: str = "No microphone available") -> None:
        super().__init__(detail=detail, code="DEVICE_UNAVAILABLE", status_code=503)


class InvalidTransitionError(VoiceNotesError):
    """Raised for an illegal recording state-machine transition."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            detail=f"Cannot move from {current} to {target}",
            code="INVALID_TRANSITION",
            status_code=409,
        )
