"""
Abstract base class for chat LLM providers.

All chat implementations (OpenAI, Claude) must implement this interface,
enabling provider-agnostic chat in the service layer.  The system prompt
that grounds the conversation in a transcript is built here so every
provider sends the same instruction.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping

from voicenotes.core.exceptions import InvalidPayloadError

_ALLOWED_ROLES = {"user", "assistant"}


def build_system_prompt(transcription: str) -> str:
    """Return the system instruction naming the transcription content."""
    return (
        "You are an AI assistant. Your task is to answer questions and have a "
        f'conversation based on the following transcription: "{transcription}"'
    )


def normalize_history(history: Iterable[Mapping[str, str]]) -> list[dict[str, str]]:
    """Validate chat history and reduce each turn to ``role``/``content``.

    Raises:
        InvalidPayloadError: If the history is empty or a turn has an unknown role.
    """
    turns: list[dict[str, str]] = []
    for turn in history:
        role = str(turn["role"])
        if role not in _ALLOWED_ROLES:
            raise InvalidPayloadError(f"Unknown chat role: {role}")
        turns.append({"role": role, "content": str(turn["content"])})
    if not turns:
        raise InvalidPayloadError("Chat history must contain at least one message")
    return turns


def build_messages(
    history: Iterable[Mapping[str, str]],
    transcription: str,
) -> list[dict[str, str]]:
    """Prepend the grounding system message to the conversation history."""
    return [
        {"role": "system", "content": build_system_prompt(transcription)},
        *normalize_history(history),
    ]


class BaseChatLLM(ABC):
    """Interface that every chat provider must implement."""

    @abstractmethod
    async def chat(
        self,
        history: Iterable[Mapping[str, str]],
        transcription: str,
        **kwargs,
    ) -> str:
        """Answer the last user turn, grounded in *transcription*.

        Args:
            history: Prior turns (role/content) ending with the new user turn.
            transcription: Transcript the conversation is about.
            **kwargs: Provider-specific options (max_tokens, etc.).

        Returns:
            The assistant's reply text.

        Raises:
            ChatError: On any remote or network failure.
        """

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
