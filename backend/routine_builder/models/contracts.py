"""Routine builder contract models.

Shared by the state core, the storage layer and the HTTP API. Storage and
wire payloads keep the original browser field names (``__pid``,
``preferredDirection``) so previously persisted selections stay readable.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# === Catalog ===


def _stringify_number(value: object) -> object:
    # Catalog files commonly carry numeric ids; pids are always strings
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Product(BaseModel):
    """One record of the catalog document. Only ``name`` is mandatory."""

    id: str | None = None
    name: str
    brand: str | None = None
    category: str | None = None
    description: str | None = None
    image: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: object) -> object:
        return _stringify_number(value)


class DisplayProduct(Product):
    """A product annotated with its pid, as shown in the grid or the selection."""

    model_config = ConfigDict(populate_by_name=True)

    pid: str = Field(alias="__pid")

    @field_validator("pid", mode="before")
    @classmethod
    def coerce_pid(cls, value: object) -> object:
        return _stringify_number(value)


class CatalogDocument(BaseModel):
    products: list[Product]


# === Session state pieces ===


class FilterState(BaseModel):
    category: str = ""  # empty = all categories
    search_term: str = ""  # empty = no text filter


class ChatTurn(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatLogEntry(BaseModel):
    """One line of the visible chat window (not the transcript)."""

    role: Literal["user", "assistant"]
    text: str
    placeholder: bool = False
    ticket: str | None = None  # set only on placeholders


# === API Request/Response Models ===


class CreateSessionRequest(BaseModel):
    device_fingerprint: str = Field(min_length=1)


class CreateSessionResponse(BaseModel):
    session_id: str


class FilterUpdateRequest(BaseModel):
    """Partial filter update; omitted fields keep their current value."""

    category: str | None = None
    search_term: str | None = None


class MessageRequest(BaseModel):
    text: str


class ProductCard(DisplayProduct):
    selected: bool = False


class SelectedPanel(BaseModel):
    items: list[DisplayProduct] = []
    show_clear_all: bool = False


class SessionView(BaseModel):
    session_id: str
    filter: FilterState
    products: list[ProductCard] = []
    empty_message: str | None = None
    selected: SelectedPanel
    chat_log: list[ChatLogEntry] = []
    status: Literal["idle", "awaiting_reply"] = "idle"
    direction: Literal["ltr", "rtl"] = "ltr"
    lang: str = "en"


class DebugSnapshot(BaseModel):
    current_products: list[DisplayProduct] = []
    selected_products: list[DisplayProduct] = []


class CategoryListResponse(BaseModel):
    categories: list[str] = []


# === Chat proxy wire format ===


class ProxyChatRequest(BaseModel):
    messages: list[ChatTurn] = Field(min_length=1)


class ProxyChatResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str
    message: str
    retryable: bool
    detail: str | None = None
