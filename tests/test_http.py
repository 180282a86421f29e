"""
Tests for the HTTP front-end.
"""

import base64

import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel

from conftest import echo_tool_result, text_response, tool_response
from openaci.config import LLMConfig
from openaci.http import HttpIntentRouter, create_app
from openaci.intent.router import IntentRequest, IntentRouter


class Name(BaseModel):
    name: str


async def encode_name(request: IntentRequest) -> str:
    return base64.b64encode(request.entities.name.encode()).decode()


@pytest.fixture
def http(router: IntentRouter) -> TestClient:
    router.register("Convert name to base64", Name, encode_name)
    return TestClient(create_app(router))


class TestHttpFrontEnd:
    """Tests for request/response mapping."""

    def test_text_response(self, http: TestClient, client):
        client.complete.side_effect = echo_tool_result(
            tool_response("convert_name_to_base64", {"name": "Alice", "response_format": "text:plain"})
        )

        response = http.post("/", content="please base64 encode Alice")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.headers["x-response-format"] == "text:plain"
        assert response.text == "QWxpY2U="

    def test_body_is_stripped(self, http: TestClient, client):
        client.complete.side_effect = echo_tool_result(
            tool_response("convert_name_to_base64", {"name": "Alice", "response_format": "text:plain"})
        )

        http.post("/", content="\n  please base64 encode Alice  \n")

        first = client.complete.await_args_list[0].kwargs
        assert first["messages"][1].content == "please base64 encode Alice"

    def test_structured_response(self, http: TestClient, client):
        client.complete.side_effect = [
            tool_response("convert_name_to_base64", {"name": "Alice", "response_format": "structured:json"}),
            text_response('{"encoded": "QWxpY2U="}'),
        ]

        response = http.post("/", content="encode Alice as json")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"encoded": "QWxpY2U="}

    def test_binary_response_is_decoded(self, http: TestClient, client):
        audio = b"ID3\x03\x00fake-mp3"
        client.complete.side_effect = [
            tool_response("convert_name_to_base64", {"name": "Alice", "response_format": "audio:mp3"}),
            text_response("Alice is QWxpY2U="),
        ]
        client.synthesize_speech.return_value = base64.b64encode(audio).decode()

        response = http.post("/", content="read it to me")

        assert response.status_code == 200
        assert response.headers["content-type"] == "audio/mpeg"
        assert response.content == audio

    @pytest.mark.parametrize("requested", ["audio:mp3", "image:png"])
    def test_fallback_in_media_format_served_as_text(self, http: TestClient, client, requested: str):
        message = "Sorry, I don't have the capability to book flights."
        client.complete.return_value = tool_response(
            "cannot_fulfill_intent",
            {"message": message, "response_format": requested},
        )

        response = http.post("/", content="book me a flight and read it out")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.headers["x-response-format"] == "text:plain"
        assert response.text == message

    def test_undecodable_media_returns_500(self, http: TestClient, client):
        client.complete.side_effect = [
            tool_response("convert_name_to_base64", {"name": "Alice", "response_format": "audio:mp3"}),
            text_response("Alice is QWxpY2U="),
        ]
        client.synthesize_speech.return_value = "abcde"

        response = http.post("/", content="read it to me")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}

    def test_any_path_and_method(self, http: TestClient, client):
        client.complete.return_value = tool_response(
            "cannot_fulfill_intent",
            {"message": "Sorry, I don't have the capability to book flights.", "response_format": "text:plain"},
        )

        response = http.put("/some/where", content="book me a flight")

        assert response.status_code == 200
        assert response.text == "Sorry, I don't have the capability to book flights."

    def test_handler_failure_returns_500(self, router: IntentRouter, client):
        async def broken(request: IntentRequest):
            raise RuntimeError("boom")

        router.register("Convert name to base64", Name, broken)
        client.complete.return_value = tool_response(
            "convert_name_to_base64", {"name": "test", "response_format": "text:plain"}
        )
        http = TestClient(create_app(router))

        response = http.post("/", content="test")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}

    def test_server_keeps_serving_after_error(self, http: TestClient, client):
        client.complete.side_effect = [
            RuntimeError("model unavailable"),
            tool_response("cannot_fulfill_intent", {"message": "no", "response_format": "text:plain"}),
        ]

        assert http.post("/", content="first").status_code == 500
        assert http.post("/", content="second").text == "no"

    def test_empty_body_returns_500(self, http: TestClient, client):
        response = http.post("/", content="")

        assert response.status_code == 500
        client.complete.assert_not_awaited()


class TestHttpIntentRouter:
    """Tests for the router subclass with an attached app."""

    def test_app_is_cached(self, client):
        router = HttpIntentRouter(client=client, config=LLMConfig())
        assert router.app is router.app

    def test_serves_own_intents(self, client):
        router = HttpIntentRouter(client=client, config=LLMConfig())
        router.register("Convert name to base64", Name, encode_name)
        client.complete.side_effect = echo_tool_result(
            tool_response("convert_name_to_base64", {"name": "Alice", "response_format": "text:plain"})
        )

        response = TestClient(router.app).post("/", content="please base64 encode Alice")

        assert response.text == "QWxpY2U="
