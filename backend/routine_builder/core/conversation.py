"""Conversation context: the transcript resent on every backend call, plus prompts.

The transcript opens with exactly one system turn and is append-only after
that. The backend keeps no state, so this list is the whole memory of the
conversation, including the routine prompt that later questions refer to.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path

from routine_builder.errors import EmptySelectionError
from routine_builder.models.contracts import ChatTurn, Product

PROMPTS_DIR = Path(__file__).resolve().parent.parent.parent / "prompts"

THINKING_PLACEHOLDER = "…thinking…"
ROUTINE_PLACEHOLDER = "…creating your personalized routine…"
EMPTY_SELECTION_MESSAGE = "Please select at least one product to generate a routine."

UNKNOWN = "Unknown"
NO_DESCRIPTION = "No description available"

ROUTINE_INSTRUCTIONS = """Please create a detailed skincare/beauty routine using these products. Include:
- The order in which to use them (morning and/or evening)
- How to apply each product
- Any tips for best results
- How often to use each product"""


@lru_cache(maxsize=1)
def load_system_prompt() -> str:
    return (PROMPTS_DIR / "advisor_system.txt").read_text(encoding="utf-8").strip()


def new_transcript(system_prompt: str | None = None) -> list[ChatTurn]:
    return [ChatTurn(role="system", content=system_prompt or load_system_prompt())]


def append_turn(transcript: Sequence[ChatTurn], role: str, content: str) -> list[ChatTurn]:
    if role == "system":
        raise ValueError("the transcript holds a single system turn, set at creation")
    return [*transcript, ChatTurn(role=role, content=content)]  # type: ignore[arg-type]


def _describe(index: int, product: Product) -> str:
    brand = product.brand or UNKNOWN
    category = product.category or UNKNOWN
    description = product.description or NO_DESCRIPTION
    return f"{index}. {product.name} by {brand} ({category})\n   Description: {description}"


def build_routine_prompt(selection: Sequence[Product]) -> str:
    """Deterministic routine request: numbered product list, then fixed instructions.

    Raises EmptySelectionError when nothing is selected.
    """
    if not selection:
        raise EmptySelectionError(EMPTY_SELECTION_MESSAGE)
    listing = "\n\n".join(_describe(i, p) for i, p in enumerate(selection, start=1))
    return f"I have selected the following products:\n\n{listing}\n\n{ROUTINE_INSTRUCTIONS}"


def routine_request_label(count: int) -> str:
    """What the chat window shows in place of the full routine prompt."""
    return f"Generate a routine for my {count} selected product{'s' if count > 1 else ''}"


def inline_error(exc: Exception) -> str:
    """Reply text used when the backend fails; the conversation carries on."""
    return f"Error: {exc}"
