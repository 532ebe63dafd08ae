"""
Storage module - recording metadata in SQL, audio bytes in S3.
"""

from voicenotes.services.storage.database import (
    Base,
    build_engine,
    close_db,
    get_engine,
    get_session,
    init_db,
    use_engine,
)
from voicenotes.services.storage.models_db import ChatMessage, Recording
from voicenotes.services.storage.object_store import S3ObjectStore
from voicenotes.services.storage.repository import RecordingRepository

__all__ = [
    "Base",
    "ChatMessage",
    "Recording",
    "RecordingRepository",
    "S3ObjectStore",
    "build_engine",
    "close_db",
    "get_engine",
    "get_session",
    "init_db",
    "use_engine",
]
