from __future__ import annotations

from pydantic import BaseModel

from routine_builder.core.conversation import new_transcript
from routine_builder.core.filtering import PidMode
from routine_builder.core.preferences import Direction
from routine_builder.models.contracts import (
    ChatLogEntry,
    ChatTurn,
    DisplayProduct,
    FilterState,
    Product,
)


class SessionState(BaseModel):
    """Everything one user session holds. Reducers replace it, never mutate it."""

    filter: FilterState = FilterState()
    filter_applied: bool = False  # any category/search input seen yet
    catalog: list[Product] | None = None  # None until the shared catalog loads
    visible: list[DisplayProduct] = []
    selection: list[DisplayProduct] = []
    transcript: list[ChatTurn] = []
    chat_log: list[ChatLogEntry] = []
    pending_tickets: list[str] = []
    next_ticket: int = 1
    direction: Direction = "ltr"
    pid_mode: PidMode = "positional"

    @property
    def awaiting_reply(self) -> bool:
        return bool(self.pending_tickets)


def initial_state(
    selection: list[DisplayProduct] | None = None,
    direction: Direction = "ltr",
    pid_mode: PidMode = "positional",
    system_prompt: str | None = None,
) -> SessionState:
    return SessionState(
        selection=list(selection or []),
        transcript=new_transcript(system_prompt),
        direction=direction,
        pid_mode=pid_mode,
    )
