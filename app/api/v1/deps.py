"""
FastAPI dependencies — database session, fallback cache and admin guard.

There is no server-side session: callers name themselves explicitly, in
the request body for attendance/approval actions and in the ``X-Actor-Id``
header for admin-only management endpoints.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import async_session_factory
from app.models.employee import ROLE_ADMIN, Employee
from app.services.employees import require_role
from app.services.fallback_cache import FallbackCache


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Degraded mode ───────────────────────────────────────────────────
def get_fallback_cache(request: Request) -> FallbackCache:
    return request.app.state.fallback_cache


# ── Actor dependencies ──────────────────────────────────────────────
async def require_admin(
    actor_id: Optional[int] = Header(default=None, alias="X-Actor-Id"),
    db: AsyncSession = Depends(get_db),
) -> Employee:
    """Only allow an active admin employee to proceed."""
    if actor_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Id header required",
        )
    return await require_role(db, actor_id, (ROLE_ADMIN,), "Admin privileges required")
