"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, and the health endpoint. The storage, speech-to-text, and chat
gateways are built here (or injected by the caller) and kept on
``app.state``. The module-level ``app`` instance allows
``uvicorn voicenotes.api.app:app --reload``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from voicenotes.api.middleware.error_handler import register_error_handlers
from voicenotes.api.routes import chat, recording, transcription
from voicenotes.core.config import configure_logging, get_settings
from voicenotes.core.models import HealthResponse
from voicenotes.services.llm import BaseChatLLM, create_llm
from voicenotes.services.storage.database import close_db, init_db
from voicenotes.services.storage.object_store import S3ObjectStore
from voicenotes.services.transcription import BaseSTT, create_stt

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    Startup: configure logging and create the database tables if needed.
    Shutdown: close the HTTP clients of the AI gateways, then dispose the
    DB engine.
    """
    configure_logging(get_settings().log_level)
    await init_db()
    logger.info("Voice Notes AI started (bucket=%s)", app.state.object_store.bucket)
    yield
    await app.state.stt.aclose()
    await app.state.llm.aclose()
    await close_db()


def create_app(
    object_store: S3ObjectStore | None = None,
    stt: BaseSTT | None = None,
    llm: BaseChatLLM | None = None,
) -> FastAPI:
    """Build and return a fully configured FastAPI application.

    Args:
        object_store: Storage gateway; built from settings when omitted.
        stt: Speech-to-text provider; built from ``stt_provider`` when omitted.
        llm: Chat provider; built from ``chat_provider`` when omitted.

    Returns:
        FastAPI: The configured application, ready for ``uvicorn``.
    """
    settings = get_settings()

    app = FastAPI(
        title="Voice Notes AI",
        description="Record voice notes, transcribe them, and chat about the transcript.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # -- Gateways --
    app.state.object_store = object_store or S3ObjectStore.from_settings()
    app.state.stt = stt or create_stt(settings.stt_provider)
    app.state.llm = llm or create_llm(settings.chat_provider)

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api/v1) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(recording.router, prefix="/api/v1")
    app.include_router(transcription.router, prefix="/api/v1")
    app.include_router(chat.router, prefix="/api/v1")

    return app


app = create_app()
