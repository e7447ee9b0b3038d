"""
Employee CRUD endpoints.

- GET operations are open to any caller.
- POST / PUT / DELETE operations require an admin actor.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db, get_fallback_cache, require_admin
from app.models.employee import ROLE_SUPERVISOR, Employee
from app.schemas.employee import EmployeeCreate, EmployeeRead, EmployeeUpdate, Role
from app.schemas.system import DeleteResponse
from app.services import employees as employee_service
from app.services.fallback_cache import FallbackCache, read_through

router = APIRouter(tags=["employees"])


@router.get("/employees", response_model=list[EmployeeRead])
async def list_employees(
    response: Response,
    department_id: int | None = Query(default=None, alias="departmentId"),
    role: Role | None = None,
    db: AsyncSession = Depends(get_db),
    cache: FallbackCache = Depends(get_fallback_cache),
) -> list[EmployeeRead]:
    async def _load() -> list[EmployeeRead]:
        rows = await employee_service.list_employees(db, department_id=department_id, role=role)
        return [EmployeeRead.model_validate(e) for e in rows]

    key = f"employees:{department_id}:{role}"
    employees, degraded = await read_through(cache, key, _load)
    if degraded:
        response.headers["X-Degraded-Mode"] = "true"
    return employees


@router.post("/employees", response_model=EmployeeRead, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    _admin: Employee = Depends(require_admin),
) -> Employee:
    return await employee_service.create_employee(db, body)


@router.get("/employees/{employee_id}", response_model=EmployeeRead)
async def get_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
) -> Employee:
    return await employee_service.require_employee(db, employee_id)


@router.put("/employees/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: int,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: Employee = Depends(require_admin),
) -> Employee:
    return await employee_service.update_employee(db, employee_id, body)


@router.delete("/employees/{employee_id}", response_model=DeleteResponse)
async def delete_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: Employee = Depends(require_admin),
) -> DeleteResponse:
    """Soft-delete (deactivate) an employee. Attendance history is preserved."""
    employee = await employee_service.deactivate_employee(db, employee_id)
    return DeleteResponse(success=True, message=f"Employee '{employee.name}' deactivated")


@router.get("/team/{supervisor_id}", response_model=list[EmployeeRead])
async def list_team(
    supervisor_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[Employee]:
    """Everyone the supervisor manages directly or through their department."""
    supervisor = await employee_service.require_role(
        db, supervisor_id, (ROLE_SUPERVISOR,), "Only supervisors have a team"
    )
    return await employee_service.list_team(db, supervisor)
