"""
Speech-to-text providers, selected by ``settings.stt_provider``.
"""

from .base import BaseSTT
from .groq import GroqWhisperSTT

__all__ = ["PROVIDERS", "BaseSTT", "GroqWhisperSTT", "create_stt"]

PROVIDERS: dict[str, type[BaseSTT]] = {
    "groq": GroqWhisperSTT,
}


def create_stt(provider: str, **kwargs) -> BaseSTT:
    """Instantiate the provider registered under *provider* (case-insensitive).

    Keyword arguments go to the provider constructor, which falls back to
    settings for anything omitted.

    Raises:
        ValueError: If no provider has that name.
    """
    try:
        provider_cls = PROVIDERS[provider.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown STT provider {provider!r}; choose one of {', '.join(sorted(PROVIDERS))}"
        ) from None
    return provider_cls(**kwargs)
