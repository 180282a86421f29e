"""
Claude (Anthropic) LLM Provider

Implementation for Anthropic's Claude models using the tool-use API.
"""

from __future__ import annotations

import json
import time
from typing import Any

import structlog

from openaci.llm.gateway import LLMResponse, Message, Role, ToolCall, ToolSpec
from openaci.llm.providers.base import BaseLLMProvider

logger = structlog.get_logger(__name__)

# Anthropic requires max_tokens on every request
DEFAULT_MAX_TOKENS = 1024

TOOL_CHOICES = {
    "required": {"type": "any"},
    "auto": {"type": "auto"},
    "none": {"type": "none"},
}


class ClaudeProvider(BaseLLMProvider):
    """Anthropic Claude provider."""

    name = "claude"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        client: Any = None,
    ):
        """
        Initialize Claude provider.

        Args:
            api_key: Anthropic API key (falls back to ANTHROPIC_API_KEY)
            model: Claude model (claude-sonnet-4-20250514, claude-3-haiku, etc.)
            base_url: Optional API endpoint override
            client: Pre-configured anthropic.AsyncAnthropic instance
        """
        super().__init__(api_key=api_key, model=model)
        self.base_url = base_url
        self._client = client

    def _get_client(self):
        """Lazy-load Anthropic client."""
        if self._client is None:
            import anthropic
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key, base_url=self.base_url)
        return self._client

    @staticmethod
    def _convert_messages(messages: list[Message]) -> tuple[str | None, list[dict]]:
        """Split out the system prompt and convert the rest to Anthropic blocks."""
        system_prompt = None
        converted = []

        for msg in messages:
            if msg.role == Role.SYSTEM:
                # Claude handles system prompt separately
                system_prompt = msg.content
            elif msg.role == Role.TOOL:
                converted.append({
                    "role": "user",
                    "content": [{
                        "type": "tool_result",
                        "tool_use_id": msg.tool_call_id,
                        "content": msg.content or "",
                    }],
                })
            elif msg.tool_calls:
                blocks: list[dict] = []
                if msg.content:
                    blocks.append({"type": "text", "text": msg.content})
                for call in msg.tool_calls:
                    blocks.append({
                        "type": "tool_use",
                        "id": call.id,
                        "name": call.name,
                        "input": json.loads(call.arguments or "{}"),
                    })
                converted.append({"role": "assistant", "content": blocks})
            else:
                converted.append({"role": msg.role.value, "content": msg.content or ""})

        return system_prompt, converted

    async def complete(
        self,
        messages: list[Message],
        tools: list[ToolSpec] | None = None,
        tool_choice: str | None = None,
        max_tokens: int | None = None,
        temperature: float = 0,
        seed: int | None = None,
    ) -> LLMResponse:
        """Run a completion using Claude. The seed is not supported and ignored."""
        start_time = time.perf_counter()
        client = self._get_client()

        system_prompt, anthropic_messages = self._convert_messages(messages)

        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens or DEFAULT_MAX_TOKENS,
            "temperature": temperature,
            "messages": anthropic_messages,
        }

        if system_prompt:
            kwargs["system"] = system_prompt

        if tools:
            kwargs["tools"] = [
                {
                    "name": tool.name,
                    "description": tool.description or tool.name,
                    "input_schema": tool.parameters,
                }
                for tool in tools
            ]
            if tool_choice:
                kwargs["tool_choice"] = TOOL_CHOICES[tool_choice]

        response = await client.messages.create(**kwargs)

        latency_ms = (time.perf_counter() - start_time) * 1000

        texts = []
        tool_calls = []
        for block in response.content:
            if block.type == "text":
                texts.append(block.text)
            elif block.type == "tool_use":
                tool_calls.append(ToolCall(
                    id=block.id,
                    name=block.name,
                    arguments=json.dumps(block.input),
                ))

        return LLMResponse(
            content="".join(texts) if texts else None,
            model=response.model,
            provider=self.name,
            tool_calls=tool_calls,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            latency_ms=latency_ms,
            finish_reason=response.stop_reason or "stop",
        )
