"""
LLM Gateway

Provider-agnostic types and a thin logging gateway for the model-calling
capability used by the intent router: chat completions with function tools,
plus optional image generation and speech synthesis.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import structlog

logger = structlog.get_logger(__name__)


class AciError(Exception):
    """Base class for openaci errors."""


class ModelCallError(AciError):
    """The model provider failed to answer a request."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class UnsupportedCapabilityError(AciError):
    """The provider cannot produce the requested media."""

    def __init__(self, provider: str, capability: str):
        super().__init__(f"Provider '{provider}' does not support {capability}")
        self.provider = provider
        self.capability = capability


class Role(str, Enum):
    """Message roles in a conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass
class ToolCall:
    """A function call chosen by the model."""
    id: str
    name: str
    arguments: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass
class Message:
    """A single message in a conversation."""
    role: Role
    content: str | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    tool_call_id: str | None = None

    def to_dict(self) -> dict:
        """Convert to an OpenAI-compatible dict."""
        data: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            data["tool_calls"] = [call.to_dict() for call in self.tool_calls]
        if self.tool_call_id is not None:
            data["tool_call_id"] = self.tool_call_id
        return data


@dataclass
class ToolSpec:
    """Model-facing declaration of a callable tool."""
    name: str
    parameters: dict[str, Any]
    description: str | None = None

    def to_dict(self) -> dict:
        function: dict[str, Any] = {"name": self.name, "parameters": self.parameters}
        if self.description:
            function["description"] = self.description
        return {"type": "function", "function": function}


@dataclass
class LLMResponse:
    """Response from an LLM provider."""
    content: str | None
    model: str
    provider: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: float = 0
    finish_reason: str = "stop"

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class ModelClient(Protocol):
    """Protocol for the model-calling capability."""

    name: str

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
        ...

    async def generate_image(self, prompt: str) -> str:
        """Generate an image and return it base64-encoded."""
        ...

    async def synthesize_speech(self, text: str) -> str:
        """Synthesize speech and return the audio base64-encoded."""
        ...


class LLMGateway:
    """
    Gateway for LLM interactions.

    Wraps a single provider and adds request/response logging. Provider
    failures are re-raised as ModelCallError; nothing is retried.
    """

    def __init__(self, provider: ModelClient):
        self.provider = provider

    @property
    def name(self) -> str:
        return self.provider.name

    async def complete(
        self,
        messages: list[Message],
        tools: list[ToolSpec] | None = None,
        tool_choice: str | None = None,
        max_tokens: int | None = None,
        temperature: float = 0,
        seed: int | None = None,
    ) -> LLMResponse:
        """Run a completion through the provider."""
        logger.debug(
            "llm_request",
            provider=self.provider.name,
            message_count=len(messages),
            tool_count=len(tools or []),
            tool_choice=tool_choice,
        )

        start_time = time.perf_counter()
        try:
            response = await self.provider.complete(
                messages=messages,
                tools=tools,
                tool_choice=tool_choice,
                max_tokens=max_tokens,
                temperature=temperature,
                seed=seed,
            )
        except AciError:
            raise
        except Exception as e:
            logger.error("llm_error", provider=self.provider.name, error=str(e))
            raise ModelCallError(self.provider.name, str(e)) from e

        logger.info(
            "llm_response",
            provider=response.provider,
            model=response.model,
            tokens=response.total_tokens,
            tool_calls=[call.name for call in response.tool_calls],
            latency_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        return response

    async def generate_image(self, prompt: str) -> str:
        generate = getattr(self.provider, "generate_image", None)
        if generate is None:
            raise UnsupportedCapabilityError(self.provider.name, "image generation")
        logger.debug("llm_image_request", provider=self.provider.name)
        return await self._call(generate, prompt)

    async def synthesize_speech(self, text: str) -> str:
        synthesize = getattr(self.provider, "synthesize_speech", None)
        if synthesize is None:
            raise UnsupportedCapabilityError(self.provider.name, "speech synthesis")
        logger.debug("llm_speech_request", provider=self.provider.name, text_length=len(text))
        return await self._call(synthesize, text)

    async def _call(self, method, *args) -> str:
        try:
            return await method(*args)
        except AciError:
            raise
        except Exception as e:
            logger.error("llm_error", provider=self.provider.name, error=str(e))
            raise ModelCallError(self.provider.name, str(e)) from e
