"""
Claude chat provider implementation.

Uses the Anthropic Python SDK (``anthropic.AsyncAnthropic``).  The
transcript-grounding instruction travels as the ``system`` parameter since
the Messages API does not accept a ``system`` role in ``messages``.
"""

import logging
from collections.abc import Iterable, Mapping

from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
)

from voicenotes.core.config import get_settings
from voicenotes.core.exceptions import ChatError
from voicenotes.services.llm.base import BaseChatLLM, build_messages

logger = logging.getLogger(__name__)


class ClaudeChatLLM(BaseChatLLM):
    """Claude API chat provider."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.claude_api_key
        self._model = model or settings.claude_model
        self._max_tokens = max_tokens or settings.chat_max_tokens
        self._client = AsyncAnthropic(api_key=self._api_key)

    async def chat(
        self,
        history: Iterable[Mapping[str, str]],
        transcription: str,
        **kwargs,
    ) -> str:
        system, *turns = build_messages(history, transcription)
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=kwargs.get("max_tokens") or self._max_tokens,
                system=system["content"],
                messages=turns,
            )
            return response.content[0].text

        except APITimeoutError as exc:
            logger.warning("Claude API timeout: %s", exc)
            raise ChatError(f"Claude API request timed out: {exc}") from exc
        except APIConnectionError as exc:
            logger.warning("Claude API connection error: %s", exc)
            raise ChatError(f"Failed to connect to Claude API: {exc}") from exc
        except APIStatusError as exc:
            logger.error("Claude API returned %s: %s", exc.status_code, exc)
            raise ChatError(
                f"API request failed with status {exc.status_code}: {exc}"
            ) from exc
        except Exception as exc:
            logger.error("Unexpected Claude API error: %s", exc)
            raise ChatError(f"Claude API error: {exc}") from exc

    async def aclose(self) -> None:
        await self._client.close()
