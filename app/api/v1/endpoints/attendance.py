"""
Attendance endpoints — manual marking, self clock-in/out and listings.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db
from app.models.attendance import AttendanceRecord
from app.schemas.attendance import AttendanceRead, ClockRequest, ManualAttendanceRequest
from app.services import attendance as attendance_service

router = APIRouter(prefix="/attendance", tags=["attendance"])

_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


@router.post("/manual", response_model=AttendanceRead)
async def mark_manual(
    body: ManualAttendanceRequest,
    db: AsyncSession = Depends(get_db),
) -> AttendanceRecord:
    """Supervisor checks a team member in without a barcode."""
    return await attendance_service.mark_manual(
        db, body.supervisor_id, body.employee_id, body.status
    )


@router.post("/clock-in", response_model=AttendanceRead)
async def clock_in(
    body: ClockRequest,
    db: AsyncSession = Depends(get_db),
) -> AttendanceRecord:
    return await attendance_service.clock_in(db, body.employee_id)


@router.post("/clock-out", response_model=AttendanceRead)
async def clock_out(
    body: ClockRequest,
    db: AsyncSession = Depends(get_db),
) -> AttendanceRecord:
    return await attendance_service.clock_out(db, body.employee_id)


@router.get("", response_model=list[AttendanceRead])
async def list_attendance(
    employee_id: int | None = Query(default=None, alias="employeeId"),
    date: str | None = Query(default=None, pattern=_DATE_PATTERN),
    db: AsyncSession = Depends(get_db),
) -> list[AttendanceRecord]:
    return await attendance_service.list_attendance(db, employee_id=employee_id, date=date)


@router.get("/team/{supervisor_id}", response_model=list[AttendanceRead])
async def team_attendance(
    supervisor_id: int,
    date: str | None = Query(default=None, pattern=_DATE_PATTERN),
    db: AsyncSession = Depends(get_db),
) -> list[AttendanceRecord]:
    return await attendance_service.team_attendance(db, supervisor_id, date=date)
