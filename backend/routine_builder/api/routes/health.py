"""Health check endpoint.

Always answers 200 so load balancers keep routing; the catalog field only
reports whether the shared catalog has been fetched yet.
"""

from __future__ import annotations

from fastapi import APIRouter

from routine_builder.api.deps import get_catalog_store
from routine_builder.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    return {
        "status": "ok",
        "version": "0.1.0",
        "environment": settings.environment,
        "catalog": "loaded" if get_catalog_store().loaded else "not_loaded",
    }
