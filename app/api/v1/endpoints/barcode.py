"""
Attendance barcode endpoints.

- POST /barcode/generate — supervisor mints a barcode for their department.
- POST /barcode/scan     — staff member checks in with code + own email.
- GET  /barcode/{id}     — supervisor's current active barcode.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db
from app.models.barcode import Barcode
from app.models.employee import Employee
from app.schemas.barcode import (BarcodeGenerateRequest, BarcodeGenerateResponse,
                                 BarcodeRead, BarcodeScanRequest)
from app.schemas.employee import EmployeeRead
from app.services import barcode as barcode_service

router = APIRouter(prefix="/barcode", tags=["barcode"])


@router.post("/generate", response_model=BarcodeGenerateResponse)
async def generate_barcode(
    body: BarcodeGenerateRequest,
    db: AsyncSession = Depends(get_db),
) -> BarcodeGenerateResponse:
    barcode, department = await barcode_service.issue_token(db, body.supervisor_id)
    return BarcodeGenerateResponse(
        barcode=BarcodeRead.model_validate(barcode),
        department=department,
    )


@router.post("/scan", response_model=EmployeeRead)
async def scan_barcode(
    body: BarcodeScanRequest,
    db: AsyncSession = Depends(get_db),
) -> Employee:
    """Check the staff member in for today and return their profile."""
    return await barcode_service.redeem_token(db, body.code, body.staff_email)


@router.get("/{supervisor_id}", response_model=BarcodeRead)
async def get_active_barcode(
    supervisor_id: int,
    db: AsyncSession = Depends(get_db),
) -> Barcode:
    return await barcode_service.get_active_token(db, supervisor_id)
