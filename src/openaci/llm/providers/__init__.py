"""
LLM Providers

Implementations for various LLM providers.
"""

from typing import Any

from openaci.llm.providers.base import BaseLLMProvider
from openaci.llm.providers.claude import ClaudeProvider
from openaci.llm.providers.openai import OpenAIProvider


def get_provider(
    provider_name: str,
    api_key: str | None = None,
    model: str | None = None,
    base_url: str | None = None,
    client: Any = None,
    **options: Any,
) -> BaseLLMProvider:
    """
    Get an LLM provider by name.

    Args:
        provider_name: 'claude' or 'openai'
        api_key: API key for the provider
        model: Optional model override
        base_url: Optional endpoint override
        client: Optional pre-configured SDK client
        **options: Extra provider-specific settings (e.g. speech_voice)

    Returns:
        Configured provider instance
    """
    providers = {
        "claude": ClaudeProvider,
        "anthropic": ClaudeProvider,
        "openai": OpenAIProvider,
        "gpt": OpenAIProvider,
    }

    provider_class = providers.get(provider_name.lower())
    if not provider_class:
        raise ValueError(
            f"Unknown provider: {provider_name}. "
            f"Available: {list(providers.keys())}"
        )

    kwargs: dict[str, Any] = {"api_key": api_key, "base_url": base_url, "client": client}
    if model:
        kwargs["model"] = model
    if provider_class is OpenAIProvider:
        kwargs.update(options)

    return provider_class(**kwargs)


__all__ = [
    "BaseLLMProvider",
    "ClaudeProvider",
    "OpenAIProvider",
    "get_provider",
]
