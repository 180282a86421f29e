"""
Intent Routing Module

Registers intents and routes utterances to their handlers via model function calling.
"""

from openaci.intent.router import (
    IntentRequest,
    IntentResponse,
    IntentRouter,
    IntentSpec,
    NoToolCallError,
    ToolSelection,
    UnknownIntentError,
)
from openaci.intent.schema import FALLBACK_FUNCTION_NAME, MetadataParameters, to_function_name

__all__ = [
    "FALLBACK_FUNCTION_NAME",
    "IntentRequest",
    "IntentResponse",
    "IntentRouter",
    "IntentSpec",
    "MetadataParameters",
    "NoToolCallError",
    "ToolSelection",
    "UnknownIntentError",
    "to_function_name",
]
