"""
Recording REST endpoints.

Save, list, fetch, and transcribe recordings, plus the chat history kept
per recording.  Endpoints delegate to ``RecordingService`` and
``RecordingRepository``; no business logic here.
"""

import logging

from fastapi import APIRouter, Depends, Query

from voicenotes.api.dependencies import get_object_store, get_stt
from voicenotes.core.models import (
    AudioUrlResponse,
    ChatMessageCreate,
    ChatMessageResponse,
    MessageRole,
    RecordingResponse,
    SaveRecordingRequest,
    TranscriptionUpdate,
)
from voicenotes.services.recordings import RecordingService
from voicenotes.services.storage.database import get_session
from voicenotes.services.storage.models_db import ChatMessage, Recording
from voicenotes.services.storage.object_store import S3ObjectStore
from voicenotes.services.storage.repository import RecordingRepository
from voicenotes.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recordings", tags=["recordings"])


def _to_response(recording: Recording, audio_url: str | None = None) -> RecordingResponse:
    """Convert an ORM Recording object to its API response model."""
    return RecordingResponse(
        id=recording.id,
        duration=recording.duration,
        timestamp=recording.timestamp,
        audio_key=recording.audio_key,
        audio_url=audio_url,
        transcription=recording.transcription,
    )


def _message_to_response(message: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse(
        id=message.id,
        recording_id=message.recording_id,
        role=MessageRole(message.role),
        content=message.content,
        timestamp=message.timestamp,
    )


@router.post("", response_model=RecordingResponse)
async def save_recording(
    body: SaveRecordingRequest,
    store: S3ObjectStore = Depends(get_object_store),
):
    """Upload base64 audio, then persist its metadata row."""
    async with get_session() as session:
        service = RecordingService(RecordingRepository(session), store)
        recording = await service.save_recording(body.audio_base64, body.duration)
        url = await service.signed_url(recording)
    return _to_response(recording, url)


@router.get("", response_model=list[RecordingResponse])
async def list_recordings(
    search: str | None = Query(None),
    store: S3ObjectStore = Depends(get_object_store),
):
    """List recordings newest first, each with a freshly signed audio URL."""
    async with get_session() as session:
        service = RecordingService(RecordingRepository(session), store)
        rows = await service.list_recordings(search=search)
    return [_to_response(recording, url) for recording, url in rows]


@router.get("/{recording_id}", response_model=RecordingResponse)
async def get_recording(
    recording_id: str,
    store: S3ObjectStore = Depends(get_object_store),
):
    """Get a single recording by ID."""
    async with get_session() as session:
        service = RecordingService(RecordingRepository(session), store)
        recording = await service.get_recording(recording_id)
        url = await service.signed_url(recording)
    return _to_response(recording, url)


@router.get("/{recording_id}/audio-url", response_model=AudioUrlResponse)
async def get_audio_url(
    recording_id: str,
    store: S3ObjectStore = Depends(get_object_store),
):
    """Signed playback URL; 503 when signing failed and the caller should retry."""
    async with get_session() as session:
        service = RecordingService(RecordingRepository(session), store)
        url = await service.audio_url(recording_id)
    return AudioUrlResponse(recording_id=recording_id, audio_url=url, expires_in=store.expires_in)


@router.patch("/{recording_id}/transcription", response_model=RecordingResponse)
async def update_transcription(recording_id: str, body: TranscriptionUpdate):
    """Store the transcription text for a recording."""
    async with get_session() as session:
        repo = RecordingRepository(session)
        recording = await repo.update_transcription(recording_id, body.transcription)
    return _to_response(recording)


@router.post("/{recording_id}/transcribe", response_model=RecordingResponse)
async def transcribe_recording(
    recording_id: str,
    store: S3ObjectStore = Depends(get_object_store),
    stt: BaseSTT = Depends(get_stt),
):
    """Transcribe the stored audio server-side and persist the text."""
    async with get_session() as session:
        service = RecordingService(RecordingRepository(session), store)
        recording = await service.transcribe_stored(recording_id, stt)
        url = await service.signed_url(recording)
    return _to_response(recording, url)


@router.get("/{recording_id}/messages", response_model=list[ChatMessageResponse])
async def list_messages(recording_id: str):
    """Chat history for a recording, oldest first."""
    async with get_session() as session:
        repo = RecordingRepository(session)
        await repo.get_recording(recording_id)
        messages = await repo.list_chat_messages(recording_id)
    return [_message_to_response(m) for m in messages]


@router.post("/{recording_id}/messages", response_model=ChatMessageResponse)
async def create_message(recording_id: str, body: ChatMessageCreate):
    """Persist one chat message for a recording."""
    async with get_session() as session:
        repo = RecordingRepository(session)
        message = await repo.create_chat_message(
            recording_id=recording_id,
            role=body.role.value,
            content=body.content,
            timestamp=body.timestamp,
        )
    return _message_to_response(message)
