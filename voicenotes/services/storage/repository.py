"""
CRUD repository for the Voice Notes AI tables.

``RecordingRepository`` receives an ``AsyncSession`` and provides all
data-access methods.  It calls ``flush()`` rather than ``commit()`` so
that transaction boundaries are controlled by the caller (typically
:func:`get_session`).
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voicenotes.core.exceptions import (
    EmptyPayloadError,
    InvalidPayloadError,
    PersistenceError,
    RecordingNotFoundError,
)
from voicenotes.core.models import MessageRole
from voicenotes.services.storage.models_db import ChatMessage, Recording

logger = logging.getLogger(__name__)


def _as_utc(value: datetime | None) -> datetime:
    """Normalize a timestamp to UTC; naive values are taken as UTC already."""
    if value is None:
        return datetime.now(UTC)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class RecordingRepository:
    """Data-access layer for recordings and their chat messages.

    All methods use ``flush()`` instead of ``commit()`` so transaction
    boundaries are controlled by the caller (typically ``get_session()``
    context manager which commits on clean exit).

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _flush(self, what: str) -> None:
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            logger.error("Failed to persist %s: %s", what, exc)
            raise PersistenceError(f"Failed to persist {what}") from exc

    # ------------------------------------------------------------------
    # Recordings
    # ------------------------------------------------------------------

    async def create_recording(self, audio_key: str, duration: str) -> Recording:
        """Create and return a new recording row for an uploaded object."""
        if not audio_key:
            raise EmptyPayloadError("audio key")
        recording = Recording(audio_key=audio_key, duration=duration or "0:00")
        self._session.add(recording)
        await self._flush("recording")
        return recording

    async def get_recording(self, recording_id: str) -> Recording:
        """Return a recording by ID or raise :class:`RecordingNotFoundError`."""
        recording = await self._session.get(Recording, recording_id)
        if recording is None:
            raise RecordingNotFoundError(recording_id)
        return recording

    async def list_recordings(
        self,
        search: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Recording]:
        """Return recordings newest first, optionally filtered by id substring."""
        stmt = (
            select(Recording)
            .order_by(Recording.timestamp.desc())
            .limit(limit)
            .offset(offset)
        )
        if search:
            stmt = stmt.where(func.lower(Recording.id).contains(search.lower()))
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def update_transcription(self, recording_id: str, transcription: str) -> Recording:
        """Attach a transcription to a recording. The only mutation a recording sees."""
        recording = await self.get_recording(recording_id)
        recording.transcription = transcription
        await self._flush("transcription")
        return recording

    # ------------------------------------------------------------------
    # Chat messages
    # ------------------------------------------------------------------

    async def create_chat_message(
        self,
        recording_id: str,
        role: str,
        content: str,
        timestamp: datetime | None = None,
    ) -> ChatMessage:
        """Create and return a chat message for an existing recording."""
        if role not in {r.value for r in MessageRole}:
            raise InvalidPayloadError(f"Unknown chat role: {role}")
        if not content:
            raise EmptyPayloadError("message content")
        await self.get_recording(recording_id)

        count_stmt = select(func.count()).where(ChatMessage.recording_id == recording_id)
        seq = (await self._session.execute(count_stmt)).scalar_one()

        message = ChatMessage(
            recording_id=recording_id,
            role=role,
            content=content,
            timestamp=_as_utc(timestamp),
            seq=seq,
        )
        self._session.add(message)
        await self._flush("chat message")
        return message

    async def list_chat_messages(self, recording_id: str) -> list[ChatMessage]:
        """Return a recording's chat messages ordered by *timestamp* ascending."""
        stmt = (
            select(ChatMessage)
            .where(ChatMessage.recording_id == recording_id)
            .order_by(ChatMessage.timestamp, ChatMessage.seq)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
