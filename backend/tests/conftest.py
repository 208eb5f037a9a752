"""Shared fixtures: sample catalog, in-memory collaborators, in-process API client."""

from __future__ import annotations

import json

import httpx
import pytest

from routine_builder.api import deps
from routine_builder.api.routes.sessions import _sessions
from routine_builder.config import settings
from routine_builder.core.catalog import CatalogStore
from routine_builder.core.storage import MemoryStorage
from routine_builder.models.contracts import ChatTurn, Product

SAMPLE_PRODUCTS = [
    {
        "id": 1,
        "name": "Revitalift Serum",
        "brand": "L'Oréal Paris",
        "category": "skincare",
        "description": "Hydrating serum with hyaluronic acid.",
        "image": "https://cdn.example.com/serum.jpg",
    },
    {
        "id": 2,
        "name": "Elvive Shampoo",
        "brand": "L'Oréal Paris",
        "category": "haircare",
        "description": "Repairs damaged hair.",
        "image": "https://cdn.example.com/shampoo.jpg",
    },
    {
        "id": 3,
        "name": "Foaming Cleanser",
        "brand": "CeraVe",
        "category": "cleanser",
        "description": "Gentle daily cleanser.",
        "image": "https://cdn.example.com/cleanser.jpg",
    },
    {
        "name": "Moisturizing Cream",
        "brand": "CeraVe",
        "category": "skincare",
        "image": "https://cdn.example.com/cream.jpg",
    },
]


@pytest.fixture
def catalog_document() -> dict:
    return {"products": [dict(p) for p in SAMPLE_PRODUCTS]}


@pytest.fixture
def products(catalog_document) -> list[Product]:
    return [Product.model_validate(p) for p in catalog_document["products"]]


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


class FakeChatBackend:
    """Records every transcript it is sent; replies or raises as configured."""

    def __init__(self, reply: str = "Here is your routine.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[list[ChatTurn]] = []

    async def complete(self, messages: list[ChatTurn]) -> str:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_backend() -> FakeChatBackend:
    return FakeChatBackend()


@pytest.fixture
def catalog_store(products) -> CatalogStore:
    async def _loader(source: str) -> list[Product]:
        return list(products)

    return CatalogStore("memory://catalog", loader=_loader)


@pytest.fixture
def catalog_file(tmp_path, catalog_document):
    path = tmp_path / "products.json"
    path.write_text(json.dumps(catalog_document))
    return path


@pytest.fixture
def chat_transport():
    """MockTransport answering like the proxy, with a fixed reply."""

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"response": "Use the serum after cleansing."})

    return httpx.MockTransport(_handler)


@pytest.fixture
async def client(tmp_path, catalog_file, monkeypatch):
    """In-process API client backed by a temp catalog file and storage dir."""
    from routine_builder.main import app

    monkeypatch.setattr(settings, "catalog_source", str(catalog_file))
    monkeypatch.setattr(settings, "storage_dir", str(tmp_path / "storage"))
    deps.set_catalog_store(None)
    _sessions.clear()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    _sessions.clear()
    deps.set_catalog_store(None)


@pytest.fixture
def backend_factory():
    return FakeChatBackend
