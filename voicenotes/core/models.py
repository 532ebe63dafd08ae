"""
Pydantic v2 request / response models used across the API layer.

Recording, Transcription, Chat, Error.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------


class SaveRecordingRequest(BaseModel):
    """POST /recordings request body."""

    audio_base64: str = Field(min_length=1)
    duration: str = "0:00"


class RecordingResponse(BaseModel):
    """Standard recording representation returned by the API.

    ``audio_url`` is signed per request and is ``None`` when signing failed.
    """

    id: str
    duration: str
    timestamp: datetime
    audio_key: str
    audio_url: str | None = None
    transcription: str | None = None


class AudioUrlResponse(BaseModel):
    """GET /recordings/{id}/audio-url response."""

    recording_id: str
    audio_url: str
    expires_in: int


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscribeRequest(BaseModel):
    """POST /transcriptions request body."""

    audio_base64: str = Field(min_length=1)


class TranscriptionResponse(BaseModel):
    """Plain-text transcript returned by the speech-to-text service."""

    text: str


class TranscriptionUpdate(BaseModel):
    """PATCH /recordings/{id}/transcription request body."""

    transcription: str


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class MessageRole(StrEnum):
    """Author of a chat turn."""

    user = "user"
    assistant = "assistant"


class ChatTurn(BaseModel):
    """One role/content pair sent to the chat model."""

    role: MessageRole
    content: str


class ChatMessageCreate(BaseModel):
    """POST /recordings/{id}/messages request body."""

    role: MessageRole
    content: str = Field(min_length=1)
    timestamp: datetime | None = None


class ChatMessageResponse(BaseModel):
    """A persisted chat message."""

    id: str
    recording_id: str
    role: MessageRole
    content: str
    timestamp: datetime


class ChatRequest(BaseModel):
    """POST /chat request body: history plus the grounding transcript."""

    messages: list[ChatTurn] = Field(min_length=1)
    transcription: str

    @field_validator("transcription")
    @classmethod
    def _non_empty_transcription(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("transcription must not be empty")
        return v


class ChatReply(BaseModel):
    """Assistant reply text."""

    content: str


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    detail: str
    code: str
    timestamp: str
