"""
Health endpoint — database reachability and degraded-mode cache size.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db, get_fallback_cache
from app.schemas.system import HealthResponse
from app.services.fallback_cache import FallbackCache

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health(
    db: AsyncSession = Depends(get_db),
    cache: FallbackCache = Depends(get_fallback_cache),
) -> HealthResponse:
    result = HealthResponse(db=False, fallback_entries=len(cache))
    try:
        await db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)
    return result
