"""Stateless catalog queries (category list, filtered products)."""

from __future__ import annotations

import structlog
from fastapi import APIRouter

from routine_builder.api.deps import get_catalog_store
from routine_builder.config import settings
from routine_builder.errors import FetchError
from routine_builder.models.contracts import CategoryListResponse, DisplayProduct, FilterState

logger = structlog.get_logger()

router = APIRouter(tags=["catalog"])


async def _ensure_loaded() -> bool:
    try:
        await get_catalog_store().load()
    except FetchError:
        return False
    return True


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories() -> CategoryListResponse:
    await _ensure_loaded()
    return CategoryListResponse(categories=get_catalog_store().categories())


@router.get("/products", response_model=list[DisplayProduct])
async def list_products(category: str = "", search: str = "") -> list[DisplayProduct]:
    """Products matching the filter; an unreachable catalog reads as empty."""
    if not await _ensure_loaded():
        return []
    filter_state = FilterState(category=category, search_term=search.strip())
    return get_catalog_store().query(filter_state, settings.synthetic_pid_mode)
