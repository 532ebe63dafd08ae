"""
Chat providers answering questions about a transcript, selected by
``settings.chat_provider``.
"""

from .base import BaseChatLLM, build_messages, build_system_prompt
from .claude import ClaudeChatLLM
from .openai import OpenAIChatLLM

__all__ = [
    "PROVIDERS",
    "BaseChatLLM",
    "ClaudeChatLLM",
    "OpenAIChatLLM",
    "build_messages",
    "build_system_prompt",
    "create_llm",
]

PROVIDERS: dict[str, type[BaseChatLLM]] = {
    "openai": OpenAIChatLLM,
    "claude": ClaudeChatLLM,
}


def create_llm(provider: str, **kwargs) -> BaseChatLLM:
    """Instantiate the chat provider registered under *provider* (case-insensitive).

    Raises:
        ValueError: If no provider has that name.
    """
    try:
        provider_cls = PROVIDERS[provider.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown chat provider {provider!r}; choose one of {', '.join(sorted(PROVIDERS))}"
        ) from None
    return provider_cls(**kwargs)
