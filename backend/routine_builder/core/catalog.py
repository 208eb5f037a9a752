"""Catalog Store — the full product list, fetched once per process."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from routine_builder.core.filtering import PidMode, compute_visible
from routine_builder.errors import FetchError
from routine_builder.models.contracts import DisplayProduct, FilterState, Product
from routine_builder.utils.http import fetch_catalog_document

logger = structlog.get_logger()

CatalogLoader = Callable[[str], Awaitable[list[Product]]]


class CatalogStore:
    """Caches the catalog after the first successful load.

    A failed load leaves the store unpopulated, so the next call tries the
    source again; nothing stale or partial is ever served.
    """

    def __init__(self, source: str, loader: CatalogLoader = fetch_catalog_document) -> None:
        self.source = source
        self._loader = loader
        self._products: list[Product] | None = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._products is not None

    @property
    def products(self) -> list[Product]:
        """Cached records, or an empty list while unpopulated."""
        return list(self._products or [])

    async def load(self) -> list[Product]:
        """Return the catalog, fetching it on first use. Raises FetchError."""
        async with self._lock:
            if self._products is None:
                try:
                    products = await self._loader(self.source)
                except FetchError as exc:
                    logger.warning("catalog_fetch_failed", source=self.source[:100], error=str(exc))
                    raise
                self._products = products
                logger.info("catalog_loaded", source=self.source[:100], count=len(products))
        return list(self._products)

    def categories(self) -> list[str]:
        return sorted({p.category for p in self._products or [] if p.category})

    def query(
        self, filter_state: FilterState, pid_mode: PidMode = "positional"
    ) -> list[DisplayProduct]:
        return compute_visible(self._products or [], filter_state, pid_mode)
