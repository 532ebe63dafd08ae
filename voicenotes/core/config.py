"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Voice Notes AI settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        chat_provider: Which chat backend to use ("openai" or "claude").
        s3_bucket: Bucket holding the raw recordings.
        signed_url_expiry: Lifetime of playback URLs in seconds.
        database_url: Async SQLAlchemy connection string for SQLite.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Speech-to-text ---
    # Groq hosts an OpenAI-compatible Whisper endpoint
    stt_provider: str = "groq"
    groq_api_key: str = ""
    transcription_url: str = "https://api.groq.com/openai/v1/audio/transcriptions"
    transcription_model: str = "whisper-large-v3"

    # --- Chat ---
    chat_provider: str = "openai"
    openai_api_key: str = ""
    chat_url: str = "https://api.openai.com/v1/chat/completions"
    chat_model: str = "gpt-4o-mini"
    chat_max_tokens: int = 150

    # Claude (Anthropic API) settings, used when chat_provider="claude"
    claude_api_key: str = ""
    claude_model: str = "claude-sonnet-4-20250514"

    http_timeout: float = 60.0  # Seconds, applied to both AI services

    # --- Object storage ---
    aws_region: str = "us-east-1"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    s3_bucket: str = "voice-notes-ai"
    signed_url_expiry: int = 3600

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]

    # --- Storage ---
    database_url: str = "sqlite+aiosqlite:///data/voicenotes.db"

    # --- UI ---
    api_base_url: str = "http://localhost:8000"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once per process (server or Streamlit page)."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
