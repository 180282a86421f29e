"""
OpenAI LLM Provider

Implementation for OpenAI's GPT models, including image generation and
text-to-speech.
"""

from __future__ import annotations

import base64
import time
from typing import Any

import structlog

from openaci.llm.gateway import LLMResponse, Message, ToolCall, ToolSpec
from openaci.llm.providers.base import BaseLLMProvider

logger = structlog.get_logger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT provider."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        client: Any = None,
        image_model: str = "dall-e-3",
        speech_model: str = "tts-1",
        speech_voice: str = "nova",
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (falls back to OPENAI_API_KEY)
            model: GPT model (gpt-4o, gpt-4o-mini, etc.)
            base_url: Optional OpenAI-compatible endpoint
            client: Pre-configured openai.AsyncOpenAI instance
            image_model: Model used for image:png output
            speech_model: Model used for audio:mp3 output
            speech_voice: TTS voice (alloy, echo, fable, onyx, nova, shimmer)
        """
        super().__init__(api_key=api_key, model=model)
        self.base_url = base_url
        self.image_model = image_model
        self.speech_model = speech_model
        self.speech_voice = speech_voice
        self._client = client

    def _get_client(self):
        """Lazy-load OpenAI client."""
        if self._client is None:
            import openai
            self._client = openai.AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    async def complete(
        self,
        messages: list[Message],
        tools: list[ToolSpec] | None = None,
        tool_choice: str | None = None,
        max_tokens: int | None = None,
        temperature: float = 0,
        seed: int | None = None,
    ) -> LLMResponse:
        """Run a chat completion using GPT."""
        start_time = time.perf_counter()
        client = self._get_client()

        # Build request kwargs
        kwargs: dict[str, Any] = {
            "model": self.model,
            "temperature": temperature,
            "messages": [msg.to_dict() for msg in messages],
        }

        if seed is not None:
            kwargs["seed"] = seed
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if tools:
            kwargs["tools"] = [tool.to_dict() for tool in tools]
            if tool_choice:
                kwargs["tool_choice"] = tool_choice

        response = await client.chat.completions.create(**kwargs)

        latency_ms = (time.perf_counter() - start_time) * 1000

        choice = response.choices[0]
        tool_calls = [
            ToolCall(
                id=call.id,
                name=call.function.name,
                arguments=call.function.arguments,
            )
            for call in (choice.message.tool_calls or [])
        ]

        return LLMResponse(
            content=choice.message.content,
            model=response.model,
            provider=self.name,
            tool_calls=tool_calls,
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
            latency_ms=latency_ms,
            finish_reason=choice.finish_reason or "stop",
        )

    async def generate_image(self, prompt: str) -> str:
        """Generate a PNG image, returned base64-encoded."""
        client = self._get_client()

        response = await client.images.generate(
            model=self.image_model,
            prompt=prompt,
            n=1,
            response_format="b64_json",
        )

        logger.debug("image_generated", model=self.image_model)
        return response.data[0].b64_json

    async def synthesize_speech(self, text: str) -> str:
        """Synthesize MP3 speech, returned base64-encoded."""
        client = self._get_client()

        logger.debug("tts_synthesizing", engine="openai", text_length=len(text))

        response = await client.audio.speech.create(
            model=self.speech_model,
            voice=self.speech_voice,
            input=text,
            response_format="mp3",
        )

        audio_bytes = response.content
        logger.debug("tts_synthesized", engine="openai", audio_bytes=len(audio_bytes))
        return base64.b64encode(audio_bytes).decode("ascii")
