"""Catalog document retrieval over HTTP or from disk.

The source is read once per process by CatalogStore. There is no timeout
and no retry: a failed read surfaces as FetchError and the caller treats
the catalog as empty.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx

from pydantic import ValidationError

from routine_builder.errors import FetchError
from routine_builder.models.contracts import CatalogDocument, Product


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def fetch_json(client: httpx.AsyncClient, url: str) -> Any:
    """GET a JSON document with the given client."""
    import httpx

    try:
        response = await client.get(url)
    except httpx.RequestError as exc:
        reason = type(exc).__name__
        raise FetchError(f"Network error fetching catalog: {url[:100]}: {reason}") from exc

    if response.status_code >= 400:
        raise FetchError(f"HTTP {response.status_code} fetching catalog: {url[:100]}")

    try:
        return response.json()
    except ValueError as exc:
        raise FetchError(f"Catalog is not valid JSON: {url[:100]}") from exc


def read_json_file(path: str | Path) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise FetchError(f"Cannot read catalog file {str(path)!r}: {exc}") from exc
    except ValueError as exc:
        # JSONDecodeError or UnicodeDecodeError
        raise FetchError(f"Catalog file {str(path)!r} is not valid JSON") from exc


def parse_catalog_document(data: Any) -> list[Product]:
    """Validate a ``{"products": [...]}`` payload and return its records."""
    if not isinstance(data, dict) or not isinstance(data.get("products"), list):
        raise FetchError("Catalog document must be an object with a 'products' list")
    try:
        return CatalogDocument.model_validate(data).products
    except ValidationError as exc:
        count = exc.error_count()
        raise FetchError(f"Malformed product record: {count} validation error(s)") from exc


async def fetch_catalog_document(
    source: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[Product]:
    """Load the catalog from a URL or a local path."""
    if not is_remote(source):
        return parse_catalog_document(read_json_file(source))

    import httpx

    async with httpx.AsyncClient(transport=transport, timeout=None) as client:
        data = await fetch_json(client, source)
    return parse_catalog_document(data)
