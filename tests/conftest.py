"""
Shared fixtures: a scripted model client standing in for the LLM.
"""

import json
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from openaci.config import LLMConfig
from openaci.intent.router import IntentRouter
from openaci.llm.gateway import LLMResponse, ToolCall
from openaci.utils.logging import CONSOLE_HANDLER, FILE_HANDLER


def tool_response(name: str, arguments: dict, call_id: str = "call_1") -> LLMResponse:
    """A first-pass response choosing one tool."""
    return LLMResponse(
        content=None,
        model="fake-model",
        provider="fake",
        tool_calls=[ToolCall(id=call_id, name=name, arguments=json.dumps(arguments))],
        finish_reason="tool_calls",
    )


def text_response(content: str) -> LLMResponse:
    return LLMResponse(content=content, model="fake-model", provider="fake")


def echo_tool_result(first: LLMResponse):
    """Side effect: answer the first call with `first`, then echo the handler output."""
    responses = iter([first])

    async def complete(messages, **kwargs):
        if kwargs.get("tool_choice") == "required":
            return next(responses)
        return text_response(json.loads(messages[-1].content))

    return complete


@pytest.fixture
def client():
    fake = MagicMock()
    fake.name = "fake"
    fake.complete = AsyncMock()
    fake.generate_image = AsyncMock()
    fake.synthesize_speech = AsyncMock()
    return fake


@pytest.fixture
def router(client):
    return IntentRouter(client=client, config=LLMConfig(model="fake-model"))


@pytest.fixture(autouse=True)
def restore_logging():
    """Drop handlers installed by setup_logging during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler.get_name() in (CONSOLE_HANDLER, FILE_HANDLER):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    structlog.reset_defaults()
