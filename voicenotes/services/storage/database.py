"""
Database wiring for recordings and chat messages.

One lazily built async engine per process.  ``get_session()`` is the unit
of work used by every route: it commits when the block exits cleanly and
rolls back otherwise.  SQLite connections get ``PRAGMA foreign_keys=ON`` so
a chat message can never reference a recording that does not exist.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from voicenotes.core.config import get_settings
from voicenotes.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for the ``recordings`` and ``chats`` tables."""


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(db_url: str) -> AsyncEngine:
    """Create an engine for *db_url*.

    File-backed SQLite gets its parent directory created and foreign key
    enforcement switched on for every new connection.
    """
    url = make_url(db_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    if is_sqlite and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_async_engine(db_url, echo=False)
    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    logger.debug("Database engine created for %s", url.render_as_string(hide_password=True))
    return engine


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = build_engine(get_settings().database_url)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


def use_engine(engine: AsyncEngine | None) -> None:
    """Point sessions at *engine* (``None`` goes back to the settings URL).

    The previous engine is not disposed; its owner is responsible for that.
    """
    global _engine, _session_factory
    _engine = engine
    _session_factory = None


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield a session for one unit of work.

    Raises:
        PersistenceError: If the final commit is rejected by the database.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        try:
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.error("Commit failed: %s", exc)
            raise PersistenceError(f"Failed to commit changes: {exc}") from exc


async def init_db() -> None:
    """Create the ``recordings`` and ``chats`` tables if they are missing."""
    from voicenotes.services.storage import models_db  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready")


async def close_db() -> None:
    """Dispose the engine on shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
