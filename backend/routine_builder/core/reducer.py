"""Pure state transitions: (state, command) -> (new state, effects).

Nothing here performs I/O. Selection changes always come back with a
PersistSelection effect carrying the full new sequence, and every chat
request is paired with a placeholder entry addressed by its ticket.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from routine_builder.core import commands as c
from routine_builder.core.conversation import (
    EMPTY_SELECTION_MESSAGE,
    ROUTINE_PLACEHOLDER,
    THINKING_PLACEHOLDER,
    append_turn,
    build_routine_prompt,
    routine_request_label,
)
from routine_builder.core.filtering import compute_visible
from routine_builder.core.preferences import flip
from routine_builder.core.selection import toggle_selection
from routine_builder.core.state import SessionState
from routine_builder.errors import EmptySelectionError
from routine_builder.models.contracts import ChatLogEntry, FilterState

Result = tuple[SessionState, list[c.Effect]]


def _refilter(state: SessionState, filter_state: FilterState) -> Result:
    effects: list[c.Effect] = []
    if state.catalog is None:
        effects.append(c.LoadCatalog())
    visible = compute_visible(state.catalog or [], filter_state, state.pid_mode)
    new = state.model_copy(
        update={"filter": filter_state, "filter_applied": True, "visible": visible}
    )
    return new, effects


def _set_category(state: SessionState, cmd: c.SetCategory) -> Result:
    return _refilter(state, state.filter.model_copy(update={"category": cmd.category}))


def _set_search_term(state: SessionState, cmd: c.SetSearchTerm) -> Result:
    search_term = cmd.search_term.strip()
    return _refilter(state, state.filter.model_copy(update={"search_term": search_term}))


def _catalog_loaded(state: SessionState, cmd: c.CatalogLoaded) -> Result:
    visible = compute_visible(cmd.products, state.filter, state.pid_mode)
    return state.model_copy(update={"catalog": list(cmd.products), "visible": visible}), []


def _toggle_product(state: SessionState, cmd: c.ToggleProduct) -> Result:
    selection = toggle_selection(state.selection, cmd.pid, state.visible)
    return state.model_copy(update={"selection": selection}), [c.PersistSelection(selection)]


def _clear_selection(state: SessionState, cmd: c.ClearSelection) -> Result:
    return state.model_copy(update={"selection": []}), [c.PersistSelection([])]


def _start_request(
    state: SessionState,
    prompt: str,
    shown_text: str,
    placeholder_text: str,
) -> Result:
    ticket = f"reply-{state.next_ticket}"
    transcript = append_turn(state.transcript, "user", prompt)
    chat_log = [
        *state.chat_log,
        ChatLogEntry(role="user", text=shown_text),
        ChatLogEntry(role="assistant", text=placeholder_text, placeholder=True, ticket=ticket),
    ]
    new = state.model_copy(
        update={
            "transcript": transcript,
            "chat_log": chat_log,
            "pending_tickets": [*state.pending_tickets, ticket],
            "next_ticket": state.next_ticket + 1,
        }
    )
    return new, [c.RequestCompletion(ticket=ticket, messages=list(transcript))]


def _submit_message(state: SessionState, cmd: c.SubmitMessage) -> Result:
    text = cmd.text.strip()
    if not text:
        return state, []
    return _start_request(state, text, text, THINKING_PLACEHOLDER)


def _generate_routine(state: SessionState, cmd: c.GenerateRoutine) -> Result:
    try:
        prompt = build_routine_prompt(state.selection)
    except EmptySelectionError:
        chat_log = [*state.chat_log, ChatLogEntry(role="assistant", text=EMPTY_SELECTION_MESSAGE)]
        return state.model_copy(update={"chat_log": chat_log}), []
    label = routine_request_label(len(state.selection))
    return _start_request(state, prompt, label, ROUTINE_PLACEHOLDER)


def _receive_reply(state: SessionState, cmd: c.ReceiveReply) -> Result:
    if cmd.ticket not in state.pending_tickets:
        return state, []
    chat_log = [
        ChatLogEntry(role="assistant", text=cmd.text) if entry.ticket == cmd.ticket else entry
        for entry in state.chat_log
    ]
    new = state.model_copy(
        update={
            "transcript": append_turn(state.transcript, "assistant", cmd.text),
            "chat_log": chat_log,
            "pending_tickets": [t for t in state.pending_tickets if t != cmd.ticket],
        }
    )
    return new, []


def _toggle_direction(state: SessionState, cmd: c.ToggleDirection) -> Result:
    direction = flip(state.direction)
    return state.model_copy(update={"direction": direction}), [c.PersistDirection(direction)]


_HANDLERS: dict[type, Callable[[SessionState, Any], Result]] = {
    c.SetCategory: _set_category,
    c.SetSearchTerm: _set_search_term,
    c.CatalogLoaded: _catalog_loaded,
    c.ToggleProduct: _toggle_product,
    c.ClearSelection: _clear_selection,
    c.SubmitMessage: _submit_message,
    c.GenerateRoutine: _generate_routine,
    c.ReceiveReply: _receive_reply,
    c.ToggleDirection: _toggle_direction,
}


def reduce(state: SessionState, command: c.Command) -> Result:
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unknown command: {type(command).__name__}")
    return handler(state, command)
