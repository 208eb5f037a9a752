"""Tests for the chat backend HTTP client (httpx.MockTransport, no network)."""

import json

import httpx
import pytest

from routine_builder.clients.chat_backend import ChatBackendClient, extract_reply
from routine_builder.core.conversation import new_transcript
from routine_builder.errors import NetworkError, ProviderError
from routine_builder.models.contracts import ChatTurn

URL = "https://chat.example.com/"


def _client(handler) -> ChatBackendClient:
    return ChatBackendClient(URL, transport=httpx.MockTransport(handler))


class TestExtractReply:
    """Verify both accepted reply shapes."""

    def test_prefers_response_field(self):
        """'response' wins over 'choices' when both are present."""
        payload = {"response": "A", "choices": [{"message": {"content": "B"}}]}
        assert extract_reply(payload) == "A"

    def test_openai_shape(self):
        """An OpenAI-style body is accepted."""
        assert extract_reply({"choices": [{"message": {"content": "B"}}]}) == "B"

    def test_empty_response_falls_back_to_choices(self):
        """An empty 'response' falls through to 'choices'."""
        assert extract_reply({"response": "", "choices": [{"message": {"content": "B"}}]}) == "B"

    @pytest.mark.parametrize(
        "payload",
        [{}, {"choices": []}, {"choices": [{"message": {}}]}, [], "text", {"response": 3}],
    )
    def test_unusable_payload(self, payload):
        """Bodies with no assistant text raise ProviderError."""
        with pytest.raises(ProviderError, match="No assistant message"):
            extract_reply(payload)


class TestComplete:
    """Verify request shape and error mapping of ChatBackendClient.complete."""

    @pytest.mark.asyncio
    async def test_posts_full_transcript(self):
        """The whole transcript is POSTed as {"messages": [...]}."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": "ok"})

        transcript = [*new_transcript("sys"), ChatTurn(role="user", content="hi")]
        assert await _client(handler).complete(transcript) == "ok"
        assert seen["method"] == "POST"
        assert seen["body"] == {
            "messages": [
                {"role": "system", "content": "sys"},
                {"role": "user", "content": "hi"},
            ]
        }

    @pytest.mark.asyncio
    async def test_non_2xx_embeds_status_and_body(self):
        """A 500 becomes ProviderError carrying status and body text."""

        def handler(request):
            return httpx.Response(500, text="server error")

        with pytest.raises(ProviderError) as exc_info:
            await _client(handler).complete(new_transcript("sys"))
        assert str(exc_info.value) == "Worker error: 500 server error"

    @pytest.mark.asyncio
    async def test_invalid_json_is_provider_error(self):
        """A 200 with a non-JSON body is a ProviderError."""

        def handler(request):
            return httpx.Response(200, text="<html>")

        with pytest.raises(ProviderError, match="invalid JSON"):
            await _client(handler).complete(new_transcript("sys"))

    @pytest.mark.asyncio
    async def test_missing_message_is_provider_error(self):
        """A 200 with no assistant text is a ProviderError."""

        def handler(request):
            return httpx.Response(200, json={"choices": []})

        with pytest.raises(ProviderError, match="No assistant message"):
            await _client(handler).complete(new_transcript("sys"))

    @pytest.mark.asyncio
    async def test_transport_failure_is_network_error(self):
        """A connection failure is a NetworkError naming the exception type."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError, match="ConnectError"):
            await _client(handler).complete(new_transcript("sys"))
