"""Integration test fixtures for Voice Notes AI.

Provides an async HTTP client over the real FastAPI app using an in-memory
SQLite database with real repository operations.  The storage gateway runs
over a mocked boto3 client; the STT and chat providers are mocks.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from voicenotes.api.app import create_app
from voicenotes.services.storage import database


@pytest.fixture
def app(object_store, mock_stt, mock_llm):
    """Create a fresh FastAPI application with injected gateways."""
    return create_app(object_store=object_store, stt=mock_stt, llm=mock_llm)


@pytest.fixture
async def async_client(app, db_engine):
    """AsyncClient backed by the in-memory test engine.

    Injects the test engine into the database module so that all routes
    use the same in-memory SQLite with tables already created.
    """
    database.use_engine(db_engine)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    database.use_engine(None)
