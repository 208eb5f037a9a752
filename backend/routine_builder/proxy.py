"""Pass-through chat proxy — forwards a client-held transcript to Claude.

Stateless: every request carries the whole conversation. System turns are
folded into the provider's system prompt; the rest is forwarded as-is,
with consecutive same-role turns merged because the provider requires
strict user/assistant alternation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import anthropic
import structlog

from routine_builder.config import settings
from routine_builder.errors import NetworkError, ProviderError
from routine_builder.models.contracts import ChatTurn

log = structlog.get_logger("proxy")


def to_provider_messages(turns: Sequence[ChatTurn]) -> tuple[str, list[dict[str, Any]]]:
    """Split a transcript into (system prompt, alternating provider messages)."""
    system_parts = [t.content for t in turns if t.role == "system"]
    messages: list[dict[str, Any]] = []
    for turn in turns:
        if turn.role == "system":
            continue
        if messages and messages[-1]["role"] == turn.role:
            messages[-1]["content"] += "\n\n" + turn.content
        else:
            messages.append({"role": turn.role, "content": turn.content})
    return "\n\n".join(system_parts), messages


def _response_text(response: Any) -> str:
    parts = [b.text for b in response.content if getattr(b, "type", None) == "text"]
    return "".join(parts).strip()


async def complete_chat(turns: Sequence[ChatTurn], client: Any | None = None) -> str:
    """Run one completion. Raises ProviderError or NetworkError."""
    system, messages = to_provider_messages(turns)
    if not messages or messages[0]["role"] != "user":
        raise ProviderError("Conversation must contain a user message before any assistant reply")

    if client is None:
        if not settings.anthropic_api_key:
            raise ProviderError("ANTHROPIC_API_KEY is not configured")
        client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)

    kwargs: dict[str, Any] = {
        "model": settings.chat_model,
        "max_tokens": settings.chat_max_tokens,
        "messages": messages,
    }
    if system:
        kwargs["system"] = system

    try:
        response = await client.messages.create(**kwargs)
    except anthropic.APIConnectionError as e:
        log.warning("proxy_provider_unreachable", error_type=type(e).__name__)
        raise NetworkError(f"Provider unreachable: {e}") from e
    except anthropic.APIStatusError as e:
        log.error("proxy_provider_error", status=e.status_code)
        raise ProviderError(f"Provider error ({e.status_code}): {e.message}") from e

    text = _response_text(response)
    if not text:
        raise ProviderError("Provider returned no text")
    log.info(
        "proxy_completion",
        turns=len(turns),
        input_tokens=response.usage.input_tokens,
        output_tokens=response.usage.output_tokens,
    )
    return text
