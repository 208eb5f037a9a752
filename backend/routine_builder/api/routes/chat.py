"""POST /chat — the pass-through proxy the session chat backend calls."""

from __future__ import annotations

import structlog
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from routine_builder.errors import ChatBackendError
from routine_builder.models.contracts import ProxyChatRequest, ProxyChatResponse
from routine_builder.proxy import complete_chat

logger = structlog.get_logger()

router = APIRouter(tags=["chat"])


@router.post(
    "/chat",
    response_model=ProxyChatResponse,
    responses={502: {"description": "Provider failure, plain-text reason"}},
)
async def chat(body: ProxyChatRequest):
    """Provider failures come back as 502 with a plain-text reason.

    The caller embeds status and body text in its own error message, so
    the body stays human-readable rather than JSON.
    """
    try:
        text = await complete_chat(body.messages)
    except ChatBackendError as exc:
        logger.warning("chat_proxy_failed", error_type=type(exc).__name__)
        return PlainTextResponse(str(exc), status_code=502)
    return ProxyChatResponse(response=text)
