"""
Page-scoped UI state.

One ``PageState`` lives in ``st.session_state`` for the lifetime of a
browser session and is passed explicitly to the workflows.  It owns the
local playback references, so it releases them when the list changes.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from voicenotes.ui.blobs import LocalBlobRegistry

# Matches the server default for signed URL lifetime (seconds)
SIGNED_URL_LIFETIME = 3600.0
# Re-sign this long before the URL actually lapses
URL_EXPIRY_MARGIN = 60.0


def _parse_timestamp(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class RecordingView:
    """A recording as displayed in the list and player."""

    id: str
    duration: str
    timestamp: datetime
    audio_key: str
    audio_url: str | None = None
    transcription: str | None = None
    local_url: str | None = None
    # Monotonic time the signed URL was issued; None when unknown
    audio_url_signed_at: float | None = None

    @classmethod
    def from_api(
        cls, data: dict, local_url: str | None = None, signed_at: float | None = None
    ) -> "RecordingView":
        audio_url = data.get("audio_url")
        return cls(
            id=data["id"],
            duration=data.get("duration", "0:00"),
            timestamp=_parse_timestamp(data["timestamp"]),
            audio_key=data["audio_key"],
            audio_url=audio_url,
            transcription=data.get("transcription"),
            local_url=local_url,
            audio_url_signed_at=signed_at if audio_url else None,
        )

    @property
    def playback_url(self) -> str | None:
        """Local reference when one exists, else the signed URL (may be ``None``)."""
        return self.local_url or self.audio_url

    @property
    def has_transcription(self) -> bool:
        return bool(self.transcription and self.transcription.strip())


class MessageStatus(StrEnum):
    pending = "pending"
    saved = "saved"
    failed = "failed"


@dataclass
class ChatMessageView:
    """A chat turn in the displayed conversation."""

    id: str
    role: str
    content: str
    timestamp: datetime
    status: MessageStatus = MessageStatus.saved

    @classmethod
    def from_api(cls, data: dict) -> "ChatMessageView":
        return cls(
            id=data["id"],
            role=data["role"],
            content=data["content"],
            timestamp=_parse_timestamp(data["timestamp"]),
        )


@dataclass
class PageState:
    """Everything the single page shows, plus the in-flight flags."""

    blobs: LocalBlobRegistry = field(default_factory=LocalBlobRegistry)
    recordings: list[RecordingView] = field(default_factory=list)
    selected_id: str | None = None
    messages: list[ChatMessageView] = field(default_factory=list)
    error: str | None = None
    search_term: str = ""
    is_loading: bool = False
    is_saving_recording: bool = False
    is_transcribing: bool = False
    is_chat_loading: bool = False
    url_lifetime: float = SIGNED_URL_LIFETIME
    clock: Callable[[], float] = time.monotonic

    # -- recordings --

    @property
    def selected(self) -> RecordingView | None:
        return self.find(self.selected_id) if self.selected_id else None

    def find(self, recording_id: str | None) -> RecordingView | None:
        return next((r for r in self.recordings if r.id == recording_id), None)

    def filtered_recordings(self) -> list[RecordingView]:
        """Recordings whose id contains the search term (case-insensitive)."""
        term = self.search_term.strip().lower()
        if not term:
            return list(self.recordings)
        return [r for r in self.recordings if term in r.id.lower()]

    def replace_recordings(self, recordings: list[RecordingView]) -> None:
        """Swap in a fresh list and release playback references it no longer uses."""
        self.recordings = list(recordings)
        self.blobs.retain_only(r.local_url for r in self.recordings)
        if self.selected_id and self.find(self.selected_id) is None:
            self.select(None)

    def prepend_recording(self, recording: RecordingView) -> None:
        self.recordings.insert(0, recording)

    def select(self, recording_id: str | None) -> None:
        if recording_id != self.selected_id:
            self.messages = []
        self.selected_id = recording_id

    def update_recording(self, recording_id: str, **changes) -> RecordingView | None:
        """Apply *changes* to the list entry; the selection sees them too."""
        recording = self.find(recording_id)
        if recording is not None:
            for name, value in changes.items():
                setattr(recording, name, value)
        return recording

    def set_audio_url(self, recording_id: str, url: str | None) -> RecordingView | None:
        """Store a freshly signed URL together with the time it was issued."""
        signed_at = self.clock() if url else None
        return self.update_recording(recording_id, audio_url=url, audio_url_signed_at=signed_at)

    def audio_url_expired(self, recording: RecordingView) -> bool:
        """True when the signed URL is missing or too old to trust.

        A URL of unknown age counts as usable; a rejected fetch re-signs it.
        """
        if recording.audio_url is None:
            return True
        if recording.audio_url_signed_at is None:
            return False
        age = self.clock() - recording.audio_url_signed_at
        return age >= self.url_lifetime - URL_EXPIRY_MARGIN

    # -- chat --

    def replace_message(self, message_id: str, message: ChatMessageView) -> None:
        for i, existing in enumerate(self.messages):
            if existing.id == message_id:
                self.messages[i] = message
                return
        self.messages.append(message)

    # -- errors --

    def set_error(self, message: str) -> None:
        """Record the most recent error; earlier ones are overwritten."""
        self.error = message

    def clear_error(self) -> None:
        self.error = None

    def close(self) -> None:
        """Release every local playback reference (page teardown)."""
        self.blobs.revoke_all()
        for recording in self.recordings:
            recording.local_url = None
