"""
Leave & overtime request submission and the approval state machine.

States are pending → approved | rejected; both outcomes are terminal.
The decision is written with a conditional UPDATE on ``status = 'pending'``
so two concurrent deciders cannot both succeed.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Union

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import Forbidden, InvalidState, NotFound
from app.models.employee import ROLE_ADMIN, ROLE_SUPERVISOR, Employee
from app.models.requests import (STATUS_APPROVED, STATUS_PENDING, STATUS_REJECTED,
                                 LeaveRequest, OvertimeRequest)
from app.schemas.requests import LeaveCreate, OvertimeCreate
from app.services.attendance import utcnow
from app.services.employees import (get_employee, require_employee, require_role,
                                   supervises, team_filter)

logger = logging.getLogger(__name__)

RequestTable = Union[type[LeaveRequest], type[OvertimeRequest]]

_DECISIONS = {"approve": STATUS_APPROVED, "reject": STATUS_REJECTED}


def overtime_hours(start_time: str, end_time: str) -> float:
    sh, sm = (int(p) for p in start_time.split(":"))
    eh, em = (int(p) for p in end_time.split(":"))
    return round(((eh * 60 + em) - (sh * 60 + sm)) / 60, 2)


# ── Submission ──────────────────────────────────────────────────────
async def submit_leave(db: AsyncSession, body: LeaveCreate) -> LeaveRequest:
    await require_employee(db, body.employee_id)
    leave = LeaveRequest(**body.model_dump(), status=STATUS_PENDING)
    db.add(leave)
    await db.commit()
    await db.refresh(leave)
    logger.info(
        "Leave request %d submitted by employee %d (%s, %d days)",
        leave.id, leave.employee_id, leave.type, leave.days,
    )
    return leave


async def submit_overtime(db: AsyncSession, body: OvertimeCreate) -> OvertimeRequest:
    await require_employee(db, body.employee_id)
    overtime = OvertimeRequest(
        **body.model_dump(),
        hours=overtime_hours(body.start_time, body.end_time),
        status=STATUS_PENDING,
    )
    db.add(overtime)
    await db.commit()
    await db.refresh(overtime)
    logger.info(
        "Overtime request %d submitted by employee %d (%.2f h)",
        overtime.id, overtime.employee_id, overtime.hours,
    )
    return overtime


# ── Decision ────────────────────────────────────────────────────────
async def _decide(
    db: AsyncSession,
    model: RequestTable,
    request_id: int,
    approver_id: int,
    decision: str,
    now: datetime | None,
):
    request = await db.get(model, request_id)
    if request is None:
        raise NotFound("Request not found")

    approver = await require_role(
        db, approver_id, (ROLE_SUPERVISOR, ROLE_ADMIN), "Only supervisors or admins can decide requests"
    )
    if request.status != STATUS_PENDING:
        raise InvalidState(f"Request is already {request.status}")

    if approver.id == request.employee_id:
        logger.warning("Employee %d may not decide their own request %d", approver_id, request_id)
        raise Forbidden("Employees cannot decide their own requests")

    requester = await get_employee(db, request.employee_id)
    if approver.role == ROLE_SUPERVISOR:
        if requester is None or not supervises(approver, requester):
            logger.warning(
                "Supervisor %d may not decide request %d of employee %d",
                approver_id, request_id, request.employee_id,
            )
            raise Forbidden("Approver does not supervise this employee")

    new_status = _DECISIONS[decision]
    result = await db.execute(
        update(model)
        .where(model.id == request_id, model.status == STATUS_PENDING)
        .values(status=new_status, approver_id=approver_id, decided_at=now or utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await db.rollback()
        raise InvalidState("Request has already been decided")
    return request, new_status


async def _reload(db: AsyncSession, model: RequestTable, request_id: int):
    result = await db.execute(
        select(model).where(model.id == request_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def decide_leave(
    db: AsyncSession,
    request_id: int,
    approver_id: int,
    decision: str,
    *,
    now: datetime | None = None,
) -> LeaveRequest:
    """Approve or reject a pending leave request.

    Approval charges the inclusive day count against the requester's quota.
    """
    request, new_status = await _decide(db, LeaveRequest, request_id, approver_id, decision, now)
    if new_status == STATUS_APPROVED:
        await db.execute(
            update(Employee)
            .where(Employee.id == request.employee_id)
            .values(used_leave=Employee.used_leave + request.days)
            .execution_options(synchronize_session=False)
        )
    await db.commit()
    logger.info("Leave request %d %s by %d", request_id, new_status, approver_id)
    return await _reload(db, LeaveRequest, request_id)


async def decide_overtime(
    db: AsyncSession,
    request_id: int,
    approver_id: int,
    decision: str,
    *,
    now: datetime | None = None,
) -> OvertimeRequest:
    _request, new_status = await _decide(db, OvertimeRequest, request_id, approver_id, decision, now)
    await db.commit()
    logger.info("Overtime request %d %s by %d", request_id, new_status, approver_id)
    return await _reload(db, OvertimeRequest, request_id)


# ── Queries ─────────────────────────────────────────────────────────
async def list_requests(
    db: AsyncSession,
    model: RequestTable,
    *,
    employee_id: int | None = None,
    status: str | None = None,
) -> list:
    query = select(model).order_by(model.created_at.desc(), model.id.desc())
    if employee_id is not None:
        query = query.where(model.employee_id == employee_id)
    if status is not None:
        query = query.where(model.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())


async def team_requests(
    db: AsyncSession, model: RequestTable, supervisor_id: int, *, status: str | None = None
) -> list:
    supervisor = await require_role(
        db, supervisor_id, (ROLE_SUPERVISOR,), "Only supervisors have a team"
    )
    query = (
        select(model)
        .join(Employee, Employee.id == model.employee_id)
        .where(team_filter(supervisor))
        .order_by(model.created_at.desc(), model.id.desc())
    )
    if status is not None:
        query = query.where(model.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())
