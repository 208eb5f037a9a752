"""Session shell — runs the effects the pure reducer asks for.

One Session owns one SessionState plus references to its collaborators:
the shared CatalogStore, the device's durable storage and the chat
backend. Every failure is absorbed here so the state always finishes in
a renderable shape (no placeholder is ever left behind).
"""

from __future__ import annotations

from typing import Protocol

import structlog

from routine_builder.core import commands as c
from routine_builder.core.catalog import CatalogStore
from routine_builder.core.conversation import inline_error
from routine_builder.core.filtering import PidMode, empty_state_message
from routine_builder.core.preferences import lang_for, load_direction, save_direction
from routine_builder.core.reducer import reduce
from routine_builder.core.selection import SelectionStore, is_selected
from routine_builder.core.state import SessionState, initial_state
from routine_builder.core.storage import KeyValueStorage
from routine_builder.errors import ChatBackendError, FetchError
from routine_builder.models.contracts import (
    ChatTurn,
    DebugSnapshot,
    ProductCard,
    SelectedPanel,
    SessionView,
)

logger = structlog.get_logger()


class ChatBackend(Protocol):
    async def complete(self, messages: list[ChatTurn]) -> str: ...


class Session:
    def __init__(
        self,
        session_id: str,
        state: SessionState,
        storage: KeyValueStorage,
        catalog: CatalogStore,
        chat_backend: ChatBackend,
    ) -> None:
        self.session_id = session_id
        self.state = state
        self.storage = storage
        self.selection_store = SelectionStore(storage)
        self.catalog = catalog
        self.chat_backend = chat_backend

    @classmethod
    def open(
        cls,
        session_id: str,
        storage: KeyValueStorage,
        catalog: CatalogStore,
        chat_backend: ChatBackend,
        pid_mode: PidMode = "positional",
    ) -> Session:
        """Start a session, restoring selection and direction from storage."""
        selection = SelectionStore(storage).restore()
        state = initial_state(selection, load_direction(storage), pid_mode)
        logger.info("session_opened", session_id=session_id, restored=len(selection))
        return cls(session_id, state, storage, catalog, chat_backend)

    # --- dispatch ---

    async def dispatch(self, command: c.Command) -> None:
        self.state, effects = reduce(self.state, command)
        for effect in effects:
            await self._run(effect)

    async def _run(self, effect: c.Effect) -> None:
        if isinstance(effect, c.PersistSelection):
            self.selection_store.persist(effect.selection)
        elif isinstance(effect, c.PersistDirection):
            save_direction(self.storage, effect.direction)
        elif isinstance(effect, c.LoadCatalog):
            await self._load_catalog()
        elif isinstance(effect, c.RequestCompletion):
            text = await self._complete(effect.messages)
            await self.dispatch(c.ReceiveReply(ticket=effect.ticket, text=text))
        else:
            raise TypeError(f"Unknown effect: {type(effect).__name__}")

    async def _load_catalog(self) -> None:
        try:
            products = await self.catalog.load()
        except FetchError:
            # Catalog stays unpopulated; the grid shows the empty state
            return
        await self.dispatch(c.CatalogLoaded(products))

    async def _complete(self, messages: list[ChatTurn]) -> str:
        try:
            return await self.chat_backend.complete(messages)
        except ChatBackendError as exc:
            logger.warning(
                "chat_reply_failed",
                session_id=self.session_id,
                error_type=type(exc).__name__,
                error=str(exc)[:200],
            )
            return inline_error(exc)

    # --- user actions ---

    async def set_category(self, category: str) -> None:
        await self.dispatch(c.SetCategory(category))

    async def set_search_term(self, search_term: str) -> None:
        await self.dispatch(c.SetSearchTerm(search_term))

    async def toggle(self, pid: str) -> None:
        await self.dispatch(c.ToggleProduct(pid))

    async def clear_all(self) -> None:
        await self.dispatch(c.ClearSelection())

    async def submit_message(self, text: str) -> None:
        await self.dispatch(c.SubmitMessage(text))

    async def generate_routine(self) -> None:
        await self.dispatch(c.GenerateRoutine())

    async def toggle_direction(self) -> None:
        await self.dispatch(c.ToggleDirection())

    # --- rendering ---

    def view(self) -> SessionView:
        state = self.state
        cards = [
            ProductCard(**p.model_dump(), selected=is_selected(state.selection, p.pid))
            for p in state.visible
        ]
        empty = None
        if not cards:
            empty = empty_state_message(state.filter, filter_applied=state.filter_applied)
        return SessionView(
            session_id=self.session_id,
            filter=state.filter,
            products=cards,
            empty_message=empty,
            selected=SelectedPanel(
                items=list(state.selection),
                show_clear_all=len(state.selection) > 1,
            ),
            chat_log=list(state.chat_log),
            status="awaiting_reply" if state.awaiting_reply else "idle",
            direction=state.direction,
            lang=lang_for(state.direction),
        )

    def debug_snapshot(self) -> DebugSnapshot:
        return DebugSnapshot(
            current_products=list(self.state.visible),
            selected_products=list(self.state.selection),
        )
