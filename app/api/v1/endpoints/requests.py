"""
Leave & overtime request endpoints.

Requests are always created ``pending``; a supervisor of the requester
(or an admin) moves them to ``approved`` or ``rejected`` exactly once.
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db
from app.models.requests import LeaveRequest, OvertimeRequest
from app.schemas.requests import (DecisionRequest, LeaveCreate, LeaveRead,
                                  OvertimeCreate, OvertimeRead)
from app.services import approvals

router = APIRouter(tags=["requests"])

RequestStatus = Literal["pending", "approved", "rejected"]


# ── Leave ───────────────────────────────────────────────────────────
@router.post("/leave", response_model=LeaveRead, status_code=201)
async def submit_leave(
    body: LeaveCreate,
    db: AsyncSession = Depends(get_db),
) -> LeaveRequest:
    return await approvals.submit_leave(db, body)


@router.get("/leave", response_model=list[LeaveRead])
async def list_leave(
    employee_id: int | None = Query(default=None, alias="employeeId"),
    status: RequestStatus | None = None,
    db: AsyncSession = Depends(get_db),
) -> list[LeaveRequest]:
    return await approvals.list_requests(db, LeaveRequest, employee_id=employee_id, status=status)


@router.get("/leave/team/{supervisor_id}", response_model=list[LeaveRead])
async def team_leave(
    supervisor_id: int,
    status: RequestStatus | None = None,
    db: AsyncSession = Depends(get_db),
) -> list[LeaveRequest]:
    return await approvals.team_requests(db, LeaveRequest, supervisor_id, status=status)


@router.post("/leave/{request_id}/decision", response_model=LeaveRead)
async def decide_leave(
    request_id: int,
    body: DecisionRequest,
    db: AsyncSession = Depends(get_db),
) -> LeaveRequest:
    return await approvals.decide_leave(db, request_id, body.approver_id, body.decision)


# ── Overtime ────────────────────────────────────────────────────────
@router.post("/overtime", response_model=OvertimeRead, status_code=201)
async def submit_overtime(
    body: OvertimeCreate,
    db: AsyncSession = Depends(get_db),
) -> OvertimeRequest:
    return await approvals.submit_overtime(db, body)


@router.get("/overtime", response_model=list[OvertimeRead])
async def list_overtime(
    employee_id: int | None = Query(default=None, alias="employeeId"),
    status: RequestStatus | None = None,
    db: AsyncSession = Depends(get_db),
) -> list[OvertimeRequest]:
    return await approvals.list_requests(db, OvertimeRequest, employee_id=employee_id, status=status)


@router.get("/overtime/team/{supervisor_id}", response_model=list[OvertimeRead])
async def team_overtime(
    supervisor_id: int,
    status: RequestStatus | None = None,
    db: AsyncSession = Depends(get_db),
) -> list[OvertimeRequest]:
    return await approvals.team_requests(db, OvertimeRequest, supervisor_id, status=status)


@router.post("/overtime/{request_id}/decision", response_model=OvertimeRead)
async def decide_overtime(
    request_id: int,
    body: DecisionRequest,
    db: AsyncSession = Depends(get_db),
) -> OvertimeRequest:
    return await approvals.decide_overtime(db, request_id, body.approver_id, body.decision)
