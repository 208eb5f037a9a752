"""HTTP client for the chat backend (the pass-through proxy).

POSTs ``{"messages": [...]}`` and accepts either ``{"response": str}`` or an
OpenAI-style ``{"choices": [{"message": {"content": str}}]}`` body,
preferring ``response``. No timeout and no retry: a call runs until it
succeeds or fails.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx
import structlog

from routine_builder.errors import NetworkError, ProviderError
from routine_builder.models.contracts import ChatTurn

logger = structlog.get_logger("chat_backend")


def extract_reply(payload: Any) -> str:
    """Pull the assistant text out of a backend response body."""
    if not isinstance(payload, dict):
        raise ProviderError("No assistant message in response")
    text = payload.get("response")
    if not text:
        try:
            text = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            text = None
    if not isinstance(text, str) or not text:
        raise ProviderError("No assistant message in response")
    return text


class ChatBackendClient:
    def __init__(
        self, endpoint_url: str, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self.endpoint_url = endpoint_url
        self._transport = transport

    async def complete(self, messages: Sequence[ChatTurn]) -> str:
        """Send the full transcript and return the reply text.

        Raises NetworkError on transport failure and ProviderError on a
        non-2xx status (status and body text embedded) or an unusable body.
        """
        body = {"messages": [m.model_dump() for m in messages]}
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                resp = await client.post(self.endpoint_url, json=body)
        except httpx.RequestError as exc:
            logger.warning("chat_backend_unreachable", error_type=type(exc).__name__)
            raise NetworkError(f"Network error: {type(exc).__name__}: {exc}") from exc

        if not resp.is_success:
            logger.warning("chat_backend_error", status=resp.status_code)
            raise ProviderError(f"Worker error: {resp.status_code} {resp.text}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ProviderError("Chat backend returned invalid JSON") from exc

        reply = extract_reply(payload)
        logger.info("chat_backend_reply", turns=len(messages), reply_chars=len(reply))
        return reply
