"""Shared pytest fixtures for the Voice Notes AI test suite.

Provides mock chat/STT providers, an S3 store over a mocked boto3 client,
sample audio, and in-memory database setup helpers.
"""

import io
import math
import struct
import wave
from unittest.mock import AsyncMock, MagicMock

import pytest

# ---------------------------------------------------------------------------
# LLM / STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm():
    """Create a mock chat provider returning a fixed reply.

    Returns:
        AsyncMock: A mock implementing the BaseChatLLM interface.
    """
    from voicenotes.services.llm.base import BaseChatLLM

    llm = AsyncMock(spec=BaseChatLLM)
    llm.chat.return_value = "You said the Q3 budget was approved."
    return llm


@pytest.fixture
def mock_stt():
    """Create a mock STT provider returning a fixed transcript.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface.
    """
    from voicenotes.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe_bytes.return_value = "We discussed the Q3 budget and approved it."
    return stt


# ---------------------------------------------------------------------------
# Object storage Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def s3_client():
    """MagicMock standing in for a boto3 S3 client.

    ``put_object`` succeeds, ``generate_presigned_url`` returns a fake signed
    URL for the requested key, and ``get_object`` returns ``b"stored-audio"``.
    """
    client = MagicMock()
    client.generate_presigned_url.side_effect = (
        lambda op, Params, ExpiresIn: f"https://signed.example/{Params['Key']}?expires={ExpiresIn}"
    )
    client.get_object.side_effect = lambda Bucket, Key: {"Body": io.BytesIO(b"stored-audio")}
    return client


@pytest.fixture
def object_store(s3_client):
    """S3ObjectStore bound to the mocked client."""
    from voicenotes.services.storage.object_store import S3ObjectStore

    return S3ObjectStore(s3_client, bucket="test-bucket", expires_in=3600)


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_wav_bytes():
    """Generate 1 second of 440Hz sine-wave WAV audio (16kHz, 16-bit, mono).

    Returns:
        bytes: A complete in-memory WAV file.
    """
    sample_rate = 16000
    amplitude = 16000  # ~50% of max int16

    frames = b"".join(
        struct.pack("<h", int(amplitude * math.sin(2 * math.pi * 440.0 * i / sample_rate)))
        for i in range(sample_rate)
    )
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(frames)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with tables, dispose after test."""
    from voicenotes.services.storage import models_db  # noqa: F401
    from voicenotes.services.storage.database import Base, build_engine

    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Yield an AsyncSession bound to the test engine; rolls back after test."""
    from sqlalchemy.ext.asyncio import async_sessionmaker

    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def repository(db_session):
    """Return a RecordingRepository bound to the test session."""
    from voicenotes.services.storage.repository import RecordingRepository

    return RecordingRepository(db_session)
