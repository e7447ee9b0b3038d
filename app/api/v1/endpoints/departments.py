"""
Department endpoints — listing with head-count, admin create/delete.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db, get_fallback_cache, require_admin
from app.models.employee import Department, Employee
from app.schemas.employee import DepartmentCreate, DepartmentRead
from app.schemas.system import DeleteResponse
from app.services import employees as employee_service
from app.services.fallback_cache import FallbackCache, read_through

router = APIRouter(prefix="/departments", tags=["departments"])


@router.get("", response_model=list[DepartmentRead])
async def list_departments(
    response: Response,
    db: AsyncSession = Depends(get_db),
    cache: FallbackCache = Depends(get_fallback_cache),
) -> list[DepartmentRead]:
    async def _load() -> list[DepartmentRead]:
        rows = await employee_service.list_departments(db)
        return [DepartmentRead.model_validate(row) for row in rows]

    departments, degraded = await read_through(cache, "departments", _load)
    if degraded:
        response.headers["X-Degraded-Mode"] = "true"
    return departments


@router.post("", response_model=DepartmentRead, status_code=201)
async def create_department(
    body: DepartmentCreate,
    db: AsyncSession = Depends(get_db),
    _admin: Employee = Depends(require_admin),
) -> Department:
    return await employee_service.create_department(db, body)


@router.delete("/{department_id}", response_model=DeleteResponse)
async def delete_department(
    department_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: Employee = Depends(require_admin),
) -> DeleteResponse:
    name = await employee_service.delete_department(db, department_id)
    return DeleteResponse(success=True, message=f"Department '{name}' deleted")
