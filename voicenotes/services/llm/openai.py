"""
OpenAI chat-completions provider.

Posts ``{model, messages, max_tokens}`` as JSON to the chat-completions
endpoint with a bearer credential and returns the first choice's message
content.  No retries.
"""

import json
import logging
from collections.abc import Iterable, Mapping

import httpx

from voicenotes.core.config import get_settings
from voicenotes.core.exceptions import ChatError
from voicenotes.services.llm.base import BaseChatLLM, build_messages

logger = logging.getLogger(__name__)


class OpenAIChatLLM(BaseChatLLM):
    """OpenAI (or compatible) chat-completions client over httpx."""

    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.openai_api_key
        self._url = url or settings.chat_url
        self._model = model or settings.chat_model
        self._max_tokens = max_tokens or settings.chat_max_tokens
        self._client = client or httpx.AsyncClient(timeout=timeout or settings.http_timeout)

    async def chat(
        self,
        history: Iterable[Mapping[str, str]],
        transcription: str,
        **kwargs,
    ) -> str:
        payload = {
            "model": self._model,
            "messages": build_messages(history, transcription),
            "max_tokens": kwargs.get("max_tokens") or self._max_tokens,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

        try:
            response = await self._client.post(self._url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Chat request failed: %s", exc)
            raise ChatError(f"Chat request failed: {exc}") from exc

        if response.is_error:
            try:
                error_body = json.dumps(response.json())
            except ValueError:
                error_body = response.text
            logger.error("Chat API returned %s: %s", response.status_code, error_body)
            raise ChatError(
                f"API request failed with status {response.status_code}: {error_body}"
            )

        try:
            return response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("Malformed chat response: %s", exc)
            raise ChatError("Chat response had no message content") from exc

    async def aclose(self) -> None:
        await self._client.aclose()
