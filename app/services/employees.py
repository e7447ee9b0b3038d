"""
Employee & department data access plus the role / team predicates the
attendance and approval services share.
"""

from __future__ import annotations

import logging

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import Conflict, Forbidden, InvalidState, NotFound
from app.core.security import get_password_hash
from app.models.barcode import Barcode
from app.models.employee import (ROLE_STAFF, ROLE_SUPERVISOR, STATUS_ACTIVE,
                                 STATUS_INACTIVE, Department, Employee)
from app.models.work_shift import WorkShift
from app.schemas.employee import DepartmentCreate, EmployeeCreate, EmployeeUpdate

logger = logging.getLogger(__name__)


# ── Lookups ─────────────────────────────────────────────────────────
async def get_employee(
    db: AsyncSession, employee_id: int, *, fresh: bool = False
) -> Employee | None:
    stmt = select(Employee).where(Employee.id == employee_id)
    if fresh:
        stmt = stmt.execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def require_employee(db: AsyncSession, employee_id: int) -> Employee:
    employee = await get_employee(db, employee_id)
    if employee is None or not employee.is_active:
        raise NotFound("Employee not found")
    return employee


async def require_role(
    db: AsyncSession, employee_id: int, roles: tuple[str, ...], detail: str
) -> Employee:
    """Resolve an acting employee and check their role, else ``Forbidden``."""
    employee = await get_employee(db, employee_id)
    if employee is None or not employee.is_active or employee.role not in roles:
        logger.warning("Employee %s denied: %s", employee_id, detail)
        raise Forbidden(detail)
    return employee


async def get_active_staff_by_email(db: AsyncSession, email: str) -> Employee | None:
    result = await db.execute(
        select(Employee).where(
            Employee.email == email,
            Employee.role == ROLE_STAFF,
            Employee.status == STATUS_ACTIVE,
        )
    )
    return result.scalar_one_or_none()


def supervises(supervisor: Employee, employee: Employee) -> bool:
    """True when *employee* is on *supervisor*'s team.

    The team is everyone who reports to the supervisor directly plus everyone
    in the supervisor's department. Nobody supervises themselves.
    """
    if employee.id == supervisor.id:
        return False
    if employee.supervisor_id == supervisor.id:
        return True
    return (
        supervisor.department_id is not None
        and employee.department_id == supervisor.department_id
    )


def team_filter(supervisor: Employee):
    """SQL counterpart of :func:`supervises`."""
    clauses = [Employee.supervisor_id == supervisor.id]
    if supervisor.department_id is not None:
        clauses.append(Employee.department_id == supervisor.department_id)
    return and_(Employee.id != supervisor.id, or_(*clauses))


async def list_team(db: AsyncSession, supervisor: Employee) -> list[Employee]:
    result = await db.execute(
        select(Employee)
        .where(team_filter(supervisor), Employee.status == STATUS_ACTIVE)
        .order_by(Employee.name)
    )
    return list(result.scalars().all())


# ── Employee CRUD ───────────────────────────────────────────────────
async def _check_links(
    db: AsyncSession, department_id: int | None, supervisor_id: int | None
) -> None:
    if department_id is not None and await db.get(Department, department_id) is None:
        raise NotFound("Department not found")
    if supervisor_id is not None:
        supervisor = await get_employee(db, supervisor_id)
        if supervisor is None or supervisor.role != ROLE_SUPERVISOR:
            raise InvalidState("supervisorId must reference a supervisor")


async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: int | None = None) -> None:
    stmt = select(Employee.id).where(Employee.email == email)
    if exclude_id is not None:
        stmt = stmt.where(Employee.id != exclude_id)
    if (await db.execute(stmt)).first() is not None:
        raise Conflict(f"Email '{email}' already registered")


async def list_employees(
    db: AsyncSession, *, department_id: int | None = None, role: str | None = None
) -> list[Employee]:
    query = select(Employee).where(Employee.status == STATUS_ACTIVE).order_by(Employee.name)
    if department_id is not None:
        query = query.where(Employee.department_id == department_id)
    if role is not None:
        query = query.where(Employee.role == role)
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_employee(db: AsyncSession, body: EmployeeCreate) -> Employee:
    await _ensure_email_free(db, body.email)
    await _check_links(db, body.department_id, body.supervisor_id)

    data = body.model_dump(exclude={"password"})
    employee = Employee(**data)
    if body.password:
        employee.hashed_password = get_password_hash(body.password)
    db.add(employee)
    await db.commit()
    logger.info("Created employee %s <%s> as %s", employee.name, employee.email, employee.role)
    return await get_employee(db, employee.id, fresh=True)  # type: ignore[return-value]


async def update_employee(db: AsyncSession, employee_id: int, body: EmployeeUpdate) -> Employee:
    employee = await require_employee(db, employee_id)
    changes = body.model_dump(exclude_unset=True)

    if "email" in changes:
        await _ensure_email_free(db, changes["email"], exclude_id=employee.id)
    await _check_links(db, changes.get("department_id"), changes.get("supervisor_id"))
    if changes.get("supervisor_id") == employee.id:
        raise InvalidState("An employee cannot supervise themselves")

    new_role = changes.get("role", employee.role)
    if employee.role == ROLE_SUPERVISOR and new_role != ROLE_SUPERVISOR:
        reports = await db.execute(
            select(func.count(Employee.id)).where(
                Employee.supervisor_id == employee.id,
                Employee.status == STATUS_ACTIVE,
            )
        )
        if reports.scalar_one():
            raise InvalidState("Reassign this supervisor's team before changing their role")
        await _deactivate_barcodes(db, Barcode.supervisor_id == employee.id)

    if changes.get("department_id", employee.department_id) != employee.department_id:
        await _deactivate_barcodes(db, Barcode.supervisor_id == employee.id)

    for field, value in changes.items():
        setattr(employee, field, value)

    await db.commit()
    logger.info("Updated employee %d: %s", employee_id, sorted(changes))
    return await get_employee(db, employee_id, fresh=True)  # type: ignore[return-value]


async def deactivate_employee(db: AsyncSession, employee_id: int) -> Employee:
    """Soft-delete. Attendance and request history keep the numeric id."""
    employee = await require_employee(db, employee_id)
    employee.status = STATUS_INACTIVE
    await _deactivate_barcodes(db, Barcode.supervisor_id == employee.id)
    await db.commit()
    logger.info("Deactivated employee %d (%s)", employee_id, employee.name)
    return employee


async def _deactivate_barcodes(db: AsyncSession, criterion) -> None:
    await db.execute(
        update(Barcode).where(criterion, Barcode.is_active.is_(True)).values(is_active=False)
    )


# ── Departments ─────────────────────────────────────────────────────
async def list_departments(db: AsyncSession) -> list[dict]:
    """Departments with their active head-count, ordered by name."""
    result = await db.execute(
        select(Department, func.count(Employee.id))
        .outerjoin(
            Employee,
            and_(Employee.department_id == Department.id, Employee.status == STATUS_ACTIVE),
        )
        .group_by(Department.id)
        .order_by(Department.name)
    )
    return [
        {
            "id": dept.id,
            "name": dept.name,
            "description": dept.description,
            "manager": dept.manager,
            "employee_count": count,
        }
        for dept, count in result.all()
    ]


async def create_department(db: AsyncSession, body: DepartmentCreate) -> Department:
    existing = await db.execute(select(Department.id).where(Department.name == body.name))
    if existing.first() is not None:
        raise Conflict(f"Department '{body.name}' already exists")

    department = Department(**body.model_dump())
    db.add(department)
    await db.commit()
    await db.refresh(department)
    logger.info("Created department %s", department.name)
    return department


async def delete_department(db: AsyncSession, department_id: int) -> str:
    department = await db.get(Department, department_id)
    if department is None:
        raise NotFound("Department not found")

    active = await db.execute(
        select(func.count(Employee.id)).where(
            Employee.department_id == department_id,
            Employee.status == STATUS_ACTIVE,
        )
    )
    if active.scalar_one():
        raise Conflict("Department still has active employees")

    await db.execute(delete(Barcode).where(Barcode.department_id == department_id))
    await db.execute(
        update(Employee).where(Employee.department_id == department_id).values(department_id=None)
    )
    await db.execute(
        update(WorkShift).where(WorkShift.department_id == department_id).values(department_id=None)
    )
    name = department.name
    await db.execute(delete(Department).where(Department.id == department_id))
    await db.commit()
    logger.info("Deleted department %d (%s)", department_id, name)
    return name
