"""
Tests for response formats.
"""

import pytest

from openaci.formats import CONTENT_TYPES, ResponseFormat


class TestResponseFormat:
    """Tests for the ResponseFormat enumeration."""

    def test_parse_tag(self):
        assert ResponseFormat("structured:yaml") is ResponseFormat.STRUCTURED_YAML

    def test_unknown_tag(self):
        with pytest.raises(ValueError):
            ResponseFormat("video:mp4")

    def test_category_and_subtype(self):
        fmt = ResponseFormat.STRUCTURED_MERMAID
        assert fmt.category == "structured"
        assert fmt.subtype == "mermaid"
        assert fmt.is_structured

    def test_binary_formats(self):
        binary = {fmt for fmt in ResponseFormat if fmt.is_binary}
        assert binary == {ResponseFormat.AUDIO_MP3, ResponseFormat.IMAGE_PNG}

    def test_every_format_has_content_type(self):
        assert set(CONTENT_TYPES) == set(ResponseFormat)

    @pytest.mark.parametrize(
        "fmt, content_type",
        [
            (ResponseFormat.TEXT_PLAIN, "text/plain"),
            (ResponseFormat.TEXT_MARKDOWN, "text/markdown"),
            (ResponseFormat.STRUCTURED_JSON, "application/json"),
            (ResponseFormat.STRUCTURED_YAML, "application/yaml"),
            (ResponseFormat.STRUCTURED_CSV, "text/csv"),
            (ResponseFormat.AUDIO_MP3, "audio/mpeg"),
            (ResponseFormat.IMAGE_PNG, "image/png"),
        ],
    )
    def test_content_type(self, fmt: ResponseFormat, content_type: str):
        assert fmt.content_type == content_type
