"""
Intent Tool Schemas

Function-name normalisation, the metadata fields every tool carries, and
composition of an intent's entity schema with those fields into the JSON
schema the model sees.
"""

from __future__ import annotations

import dataclasses
import json
import re
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from openaci.formats import ResponseFormat

FALLBACK_FUNCTION_NAME = "cannot_fulfill_intent"

_WHITESPACE_RE = re.compile(r"\s+")
_INVALID_CHARS_RE = re.compile(r"[^a-z0-9_]")


def to_function_name(label: str) -> str:
    """
    Normalise a human-readable intent label into a tool name.

    Lower-cases, turns each whitespace run into one underscore and drops
    everything outside [a-z0-9_].
    """
    name = _WHITESPACE_RE.sub("_", label.lower())
    return _INVALID_CHARS_RE.sub("", name)


class MetadataParameters(BaseModel):
    """Output-shape fields added to every intent's arguments."""

    response_format: ResponseFormat
    structured_schema: str | None = Field(
        default=None,
        description="The schema for the structured output. Only used if response_format is structured.",
    )
    message: str | None = None


METADATA_FIELDS = frozenset(MetadataParameters.model_fields)


class CannotFulfillIntent(BaseModel):
    """Entities of the built-in fallback intent."""

    message: str


def compose_parameters(schema: type[BaseModel]) -> dict[str, Any]:
    """
    Build the tool parameter schema for an entity model.

    The entity and metadata field sets are described independently and
    merged: properties and $defs are unioned (metadata definitions win on a
    clash) and required lists are combined.
    """
    entity = schema.model_json_schema()
    metadata = MetadataParameters.model_json_schema()

    properties = {**entity.get("properties", {}), **metadata.get("properties", {})}

    required = list(entity.get("required", []))
    for name in metadata.get("required", []):
        if name not in required:
            required.append(name)

    parameters: dict[str, Any] = {
        "type": "object",
        "properties": properties,
        "required": required,
    }

    defs = {**entity.get("$defs", {}), **metadata.get("$defs", {})}
    if defs:
        parameters["$defs"] = defs

    return parameters


def split_arguments(arguments: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Separate metadata fields from entity fields."""
    metadata = {k: v for k, v in arguments.items() if k in METADATA_FIELDS}
    entities = {k: v for k, v in arguments.items() if k not in METADATA_FIELDS}
    return metadata, entities


def serialize_output(result: Any) -> str:
    """JSON-encode a handler result for the tool-result message."""
    if isinstance(result, BaseModel):
        return result.model_dump_json()
    return json.dumps(result, default=_json_default)


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)
