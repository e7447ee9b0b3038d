"""
Company settings endpoints — working hours, late threshold, timezone.

Singleton pattern: only one row in company_settings. GET returns it
(or the defaults when it was never saved), PUT creates or updates it.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db, require_admin
from app.models.company_settings import CompanySettings
from app.models.employee import Employee
from app.schemas.system import CompanySettingsRead, CompanySettingsUpdate
from app.services.attendance import load_company_settings

router = APIRouter(tags=["settings"])
logger = logging.getLogger(__name__)


@router.get("/settings", response_model=CompanySettingsRead)
async def get_settings(db: AsyncSession = Depends(get_db)) -> CompanySettings:
    return await load_company_settings(db)


@router.put("/settings", response_model=CompanySettingsRead)
async def update_settings(
    body: CompanySettingsUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: Employee = Depends(require_admin),
) -> CompanySettings:
    """Update working hours, late threshold or timezone."""
    company = await load_company_settings(db)
    changes = body.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(company, field, value)

    db.add(company)
    await db.commit()
    await db.refresh(company)
    logger.info("Company settings updated: %s", changes)
    return company
