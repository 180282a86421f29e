"""
openaci

Route free-text utterances to intent handlers using LLM function calling.
"""

__version__ = "0.1.0"

from openaci.formats import ResponseFormat
from openaci.intent import (
    IntentRequest,
    IntentResponse,
    IntentRouter,
    NoToolCallError,
    UnknownIntentError,
)
from openaci.llm import AciError, ModelCallError, UnsupportedCapabilityError

__all__ = [
    "__version__",
    "AciError",
    "IntentRequest",
    "IntentResponse",
    "IntentRouter",
    "ModelCallError",
    "NoToolCallError",
    "ResponseFormat",
    "UnknownIntentError",
    "UnsupportedCapabilityError",
]
