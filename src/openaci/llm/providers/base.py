"""
Base LLM Provider

Abstract base class for LLM provider implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from openaci.llm.gateway import (
    LLMResponse,
    Message,
    ToolSpec,
    UnsupportedCapabilityError,
)


class BaseLLMProvider(ABC):
    """Base class for LLM providers."""

    name: str = "base"

    def __init__(self, api_key: str | None, model: str):
        """
        Initialize provider.

        Args:
            api_key: API key for the provider (None to use the SDK's env lookup)
            model: Model identifier
        """
        self.api_key = api_key
        self.model = model

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        tools: list[ToolSpec] | None = None,
        tool_choice: str | None = None,
        max_tokens: int | None = None,
        temperature: float = 0,
        seed: int | None = None,
    ) -> LLMResponse:
        """Run one chat completion, optionally offering tools."""
        pass

    async def generate_image(self, prompt: str) -> str:
        """Generate an image. Not supported unless overridden."""
        raise UnsupportedCapabilityError(self.name, "image generation")

    async def synthesize_speech(self, text: str) -> str:
        """Synthesize speech. Not supported unless overridden."""
        raise UnsupportedCapabilityError(self.name, "speech synthesis")
