"""User actions fed to the reducer, and the side effects it asks the shell to run."""

from __future__ import annotations

from dataclasses import dataclass

from routine_builder.core.preferences import Direction
from routine_builder.models.contracts import ChatTurn, DisplayProduct, Product

# === Commands ===


@dataclass(frozen=True)
class SetCategory:
    category: str


@dataclass(frozen=True)
class SetSearchTerm:
    search_term: str


@dataclass(frozen=True)
class CatalogLoaded:
    products: list[Product]


@dataclass(frozen=True)
class ToggleProduct:
    pid: str


@dataclass(frozen=True)
class ClearSelection:
    pass


@dataclass(frozen=True)
class SubmitMessage:
    text: str


@dataclass(frozen=True)
class GenerateRoutine:
    pass


@dataclass(frozen=True)
class ReceiveReply:
    ticket: str
    text: str


@dataclass(frozen=True)
class ToggleDirection:
    pass


Command = (
    SetCategory
    | SetSearchTerm
    | CatalogLoaded
    | ToggleProduct
    | ClearSelection
    | SubmitMessage
    | GenerateRoutine
    | ReceiveReply
    | ToggleDirection
)

# === Effects ===


@dataclass(frozen=True)
class LoadCatalog:
    pass


@dataclass(frozen=True)
class PersistSelection:
    selection: list[DisplayProduct]


@dataclass(frozen=True)
class PersistDirection:
    direction: Direction


@dataclass(frozen=True)
class RequestCompletion:
    """Call the chat backend; answer with ReceiveReply(ticket, ...)."""

    ticket: str
    messages: list[ChatTurn]


Effect = LoadCatalog | PersistSelection | PersistDirection | RequestCompletion
