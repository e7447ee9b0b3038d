"""
Auth endpoint — email/password login returning the employee profile.

No session token is issued; the client keeps the profile and passes its
identity explicitly on later calls.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db
from app.core.config import settings
from app.core.security import verify_password
from app.models.employee import STATUS_ACTIVE, Employee
from app.schemas.employee import EmployeeRead, LoginRequest

# Rate limiter, keyed by client IP
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=EmployeeRead)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> Employee:
    """Verify email + password and return the caller's profile."""
    result = await db.execute(
        select(Employee).where(Employee.email == body.email, Employee.status == STATUS_ACTIVE)
    )
    employee = result.scalar_one_or_none()

    if (
        employee is None
        or not employee.hashed_password
        or not verify_password(body.password, employee.hashed_password)
    ):
        logger.warning("Failed login for %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    logger.info("Employee %d logged in", employee.id)
    return employee
