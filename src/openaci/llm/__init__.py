"""
LLM Gateway Module

Provider-agnostic interface for language model interactions.
"""

from openaci.llm.gateway import (
    AciError,
    LLMGateway,
    LLMResponse,
    Message,
    ModelCallError,
    ModelClient,
    Role,
    ToolCall,
    ToolSpec,
    UnsupportedCapabilityError,
)
from openaci.llm.providers import ClaudeProvider, OpenAIProvider, get_provider

__all__ = [
    "AciError",
    "LLMGateway",
    "LLMResponse",
    "Message",
    "ModelCallError",
    "ModelClient",
    "Role",
    "ToolCall",
    "ToolSpec",
    "UnsupportedCapabilityError",
    "ClaudeProvider",
    "OpenAIProvider",
    "get_provider",
]
