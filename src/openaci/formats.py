"""
Response Formats

Category-prefixed output formats a caller can ask for, and the HTTP content
types they are served with.
"""

from __future__ import annotations

from enum import Enum


class ResponseFormat(str, Enum):
    """Desired shape of the final output, as `<category>:<subtype>`."""

    TEXT_PLAIN = "text:plain"
    TEXT_BASE64 = "text:base64"
    TEXT_MARKDOWN = "text:markdown"
    STRUCTURED_CSV = "structured:csv"
    STRUCTURED_JSON = "structured:json"
    STRUCTURED_YAML = "structured:yaml"
    STRUCTURED_XML = "structured:xml"
    STRUCTURED_HTML = "structured:html"
    STRUCTURED_MERMAID = "structured:mermaid"
    AUDIO_MP3 = "audio:mp3"
    IMAGE_PNG = "image:png"

    @property
    def category(self) -> str:
        return self.value.split(":", 1)[0]

    @property
    def subtype(self) -> str:
        return self.value.split(":", 1)[1]

    @property
    def is_structured(self) -> bool:
        return self.category == "structured"

    @property
    def is_binary(self) -> bool:
        """Output is base64 that must be decoded before sending."""
        return self.category in ("audio", "image")

    @property
    def content_type(self) -> str:
        return CONTENT_TYPES[self]


CONTENT_TYPES: dict[ResponseFormat, str] = {
    ResponseFormat.TEXT_PLAIN: "text/plain",
    ResponseFormat.TEXT_BASE64: "text/plain",
    ResponseFormat.TEXT_MARKDOWN: "text/markdown",
    ResponseFormat.STRUCTURED_CSV: "text/csv",
    ResponseFormat.STRUCTURED_JSON: "application/json",
    ResponseFormat.STRUCTURED_YAML: "application/yaml",
    ResponseFormat.STRUCTURED_XML: "application/xml",
    ResponseFormat.STRUCTURED_HTML: "text/html",
    ResponseFormat.STRUCTURED_MERMAID: "text/vnd.mermaid",
    ResponseFormat.AUDIO_MP3: "audio/mpeg",
    ResponseFormat.IMAGE_PNG: "image/png",
}
