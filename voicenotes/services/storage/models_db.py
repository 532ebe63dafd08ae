"""
SQLAlchemy ORM models for the Voice Notes AI schema.

Tables: ``recordings``, ``chats``.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from voicenotes.services.storage.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class UTCDateTime(TypeDecorator):
    """Stored as naive UTC, always read back timezone-aware (UTC)."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value


class Recording(Base):
    """One captured audio take plus its metadata and optional transcript."""

    __tablename__ = "recordings"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    audio_key: Mapped[str] = mapped_column(String(255))
    duration: Mapped[str] = mapped_column(String(16), default="0:00")
    timestamp: Mapped[datetime] = mapped_column(
        UTCDateTime, default=lambda: datetime.now(UTC), index=True
    )
    transcription: Mapped[str | None] = mapped_column(Text, nullable=True)

    chats: Mapped[list["ChatMessage"]] = relationship(
        back_populates="recording",
        cascade="all, delete-orphan",
        lazy="noload",
    )

    def __repr__(self) -> str:
        return f"<Recording id={self.id} key={self.audio_key!r}>"


class ChatMessage(Base):
    """One user or assistant turn of transcript-grounded conversation."""

    __tablename__ = "chats"
    __table_args__ = (Index("ix_chats_recording_timestamp", "recording_id", "timestamp"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    # Insertion order within a recording; breaks timestamp ties
    seq: Mapped[int] = mapped_column(default=0)
    recording_id: Mapped[str] = mapped_column(ForeignKey("recordings.id"))
    role: Mapped[str] = mapped_column(String(16))
    content: Mapped[str] = mapped_column(Text)
    timestamp: Mapped[datetime] = mapped_column(UTCDateTime, default=lambda: datetime.now(UTC))

    recording: Mapped["Recording"] = relationship(back_populates="chats")

    def __repr__(self) -> str:
        return f"<ChatMessage id={self.id} recording={self.recording_id} role={self.role!r}>"
