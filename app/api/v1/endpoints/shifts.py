"""
Work shift endpoints — list, admin create/delete.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db, require_admin
from app.core.exceptions import InvalidState, NotFound
from app.models.employee import Department, Employee
from app.models.work_shift import WorkShift
from app.schemas.system import DeleteResponse, WorkShiftCreate, WorkShiftRead

router = APIRouter(prefix="/shifts", tags=["shifts"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[WorkShiftRead])
async def list_shifts(
    department_id: int | None = Query(default=None, alias="departmentId"),
    db: AsyncSession = Depends(get_db),
) -> list[WorkShift]:
    query = select(WorkShift).order_by(WorkShift.start_time, WorkShift.name)
    if department_id is not None:
        query = query.where(WorkShift.department_id == department_id)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.post("", response_model=WorkShiftRead, status_code=201)
async def create_shift(
    body: WorkShiftCreate,
    db: AsyncSession = Depends(get_db),
    _admin: Employee = Depends(require_admin),
) -> WorkShift:
    if body.start_time == body.end_time:
        raise InvalidState("Shift start and end must differ")
    if body.department_id is not None and await db.get(Department, body.department_id) is None:
        raise NotFound("Department not found")

    shift = WorkShift(**body.model_dump())
    db.add(shift)
    await db.commit()
    await db.refresh(shift)
    logger.info("Created shift %s (%s-%s)", shift.name, shift.start_time, shift.end_time)
    return shift


@router.delete("/{shift_id}", response_model=DeleteResponse)
async def delete_shift(
    shift_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: Employee = Depends(require_admin),
) -> DeleteResponse:
    shift = await db.get(WorkShift, shift_id)
    if shift is None:
        raise NotFound("Shift not found")
    await db.delete(shift)
    await db.commit()
    logger.info("Deleted shift %d", shift_id)
    return DeleteResponse(success=True, message=f"Shift '{shift.name}' deleted")
