"""Pydantic schemas for attendance records and check-in actions."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from app.schemas.base import CamelModel, RequestModel

AttendanceStatus = Literal["present", "late", "absent", "leave", "sick"]


class ManualAttendanceRequest(RequestModel):
    supervisor_id: int
    employee_id: int
    status: AttendanceStatus | None = None


class ClockRequest(RequestModel):
    employee_id: int


class AttendanceRead(CamelModel):
    id: int
    employee_id: int
    date: str
    check_in: datetime | None
    check_out: datetime | None
    status: str
    notes: str | None = None
