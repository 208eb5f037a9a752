"""Process-wide collaborators shared by the routes."""

from __future__ import annotations

from routine_builder.clients.chat_backend import ChatBackendClient
from routine_builder.config import settings
from routine_builder.core.catalog import CatalogStore

_catalog_store: CatalogStore | None = None


def get_catalog_store() -> CatalogStore:
    """The catalog is fetched once per process and shared by every session."""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = CatalogStore(settings.catalog_source)
    return _catalog_store


def set_catalog_store(store: CatalogStore | None) -> None:
    global _catalog_store
    _catalog_store = store


def build_chat_backend() -> ChatBackendClient:
    return ChatBackendClient(settings.chat_endpoint_url)
