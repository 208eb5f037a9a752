"""Session API endpoints — one call per UI event.

Sessions live in memory for the process lifetime. Selection and direction
are keyed by device fingerprint in durable storage, so a new session for
the same device picks up where the last one left off.
"""

import uuid

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from routine_builder.api.deps import build_chat_backend, get_catalog_store
from routine_builder.config import settings
from routine_builder.core.storage import storage_for_device
from routine_builder.models.contracts import (
    CreateSessionRequest,
    CreateSessionResponse,
    DebugSnapshot,
    ErrorResponse,
    FilterUpdateRequest,
    MessageRequest,
    SessionView,
)
from routine_builder.session import Session

logger = structlog.get_logger()

router = APIRouter(tags=["sessions"])

_sessions: dict[str, Session] = {}

_NOT_FOUND = ("session_not_found", "Session not found")
_VIEW_RESPONSES: dict = {404: {"model": ErrorResponse}}


def _error(status: int, code: str, message: str, *, retryable: bool = False) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(error=code, message=message, retryable=retryable).model_dump(),
    )


@router.post("/sessions", status_code=201, response_model=CreateSessionResponse)
async def create_session(body: CreateSessionRequest) -> CreateSessionResponse:
    """Open a session and restore the device's saved selection."""
    session_id = str(uuid.uuid4())
    _sessions[session_id] = Session.open(
        session_id,
        storage_for_device(settings.storage_dir, body.device_fingerprint),
        get_catalog_store(),
        build_chat_backend(),
        settings.synthetic_pid_mode,
    )
    logger.info("session_created", session_id=session_id)
    return CreateSessionResponse(session_id=session_id)


@router.get("/sessions/{session_id}", response_model=SessionView, responses=_VIEW_RESPONSES)
async def get_session(session_id: str):
    session = _sessions.get(session_id)
    if session is None:
        return _error(404, *_NOT_FOUND)
    return session.view()


@router.delete("/sessions/{session_id}", status_code=204, responses=_VIEW_RESPONSES)
async def delete_session(session_id: str):
    if _sessions.pop(session_id, None) is None:
        return _error(404, *_NOT_FOUND)
    logger.info("session_deleted", session_id=session_id)


# --- Catalog view ---


@router.put("/sessions/{session_id}/filter", response_model=SessionView, responses=_VIEW_RESPONSES)
async def update_filter(session_id: str, body: FilterUpdateRequest):
    """Apply category and/or search input; loads the catalog on first use."""
    session = _sessions.get(session_id)
    if session is None:
        return _error(404, *_NOT_FOUND)
    if body.category is not None:
        await session.set_category(body.category)
    if body.search_term is not None:
        await session.set_search_term(body.search_term)
    return session.view()


# --- Selection ---


@router.post(
    "/sessions/{session_id}/selection/{pid:path}",
    response_model=SessionView,
    responses=_VIEW_RESPONSES,
)
async def toggle_selection(session_id: str, pid: str):
    session = _sessions.get(session_id)
    if session is None:
        return _error(404, *_NOT_FOUND)
    await session.toggle(pid)
    return session.view()


@router.delete(
    "/sessions/{session_id}/selection",
    response_model=SessionView,
    responses={**_VIEW_RESPONSES, 409: {"model": ErrorResponse}},
)
async def clear_selection(session_id: str, confirm: bool = False):
    """Clear every selected product. More than one item needs ``confirm=true``."""
    session = _sessions.get(session_id)
    if session is None:
        return _error(404, *_NOT_FOUND)
    count = len(session.state.selection)
    if count > 1 and not confirm:
        return _error(
            409,
            "confirmation_required",
            f"Are you sure you want to clear all {count} selected products?",
        )
    await session.clear_all()
    return session.view()


# --- Chat ---


@router.post(
    "/sessions/{session_id}/messages",
    response_model=SessionView,
    responses=_VIEW_RESPONSES,
)
async def send_message(session_id: str, body: MessageRequest):
    """Send a chat message; returns once the reply (or inline error) is in."""
    session = _sessions.get(session_id)
    if session is None:
        return _error(404, *_NOT_FOUND)
    await session.submit_message(body.text)
    return session.view()


@router.post(
    "/sessions/{session_id}/routine",
    response_model=SessionView,
    responses=_VIEW_RESPONSES,
)
async def generate_routine(session_id: str):
    session = _sessions.get(session_id)
    if session is None:
        return _error(404, *_NOT_FOUND)
    await session.generate_routine()
    return session.view()


# --- Misc ---


@router.post(
    "/sessions/{session_id}/direction",
    response_model=SessionView,
    responses=_VIEW_RESPONSES,
)
async def toggle_direction(session_id: str):
    session = _sessions.get(session_id)
    if session is None:
        return _error(404, *_NOT_FOUND)
    await session.toggle_direction()
    return session.view()


@router.get("/sessions/{session_id}/debug", response_model=DebugSnapshot, responses=_VIEW_RESPONSES)
async def debug_snapshot(session_id: str):
    """Current and selected product sets. Debug aid, not a stable contract."""
    session = _sessions.get(session_id)
    if session is None:
        return _error(404, *_NOT_FOUND)
    return session.debug_snapshot()
