"""Pydantic schemas for leave / overtime requests and decisions."""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import field_validator, model_validator

from app.schemas.base import CamelModel, RequestModel, validate_hhmm

LeaveType = Literal["annual", "sick", "personal"]
Decision = Literal["approve", "reject"]


# ── Leave ───────────────────────────────────────────────────────────
class LeaveCreate(RequestModel):
    employee_id: int
    type: LeaveType
    start_date: dt.date
    end_date: dt.date
    reason: str | None = None

    @model_validator(mode="after")
    def _range(self) -> "LeaveCreate":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class LeaveRead(CamelModel):
    id: int
    employee_id: int
    type: str
    start_date: dt.date
    end_date: dt.date
    reason: str | None
    status: str
    approver_id: int | None
    created_at: dt.datetime | None
    decided_at: dt.datetime | None = None


# ── Overtime ────────────────────────────────────────────────────────
class OvertimeCreate(RequestModel):
    employee_id: int
    date: dt.date
    start_time: str
    end_time: str
    reason: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _hhmm(cls, v: str) -> str:
        return validate_hhmm(v)

    @model_validator(mode="after")
    def _range(self) -> "OvertimeCreate":
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        return self


class OvertimeRead(CamelModel):
    id: int
    employee_id: int
    date: dt.date
    start_time: str
    end_time: str
    hours: float
    reason: str | None
    status: str
    approver_id: int | None
    created_at: dt.datetime | None
    decided_at: dt.datetime | None = None


# ── Decision ────────────────────────────────────────────────────────
class DecisionRequest(RequestModel):
    approver_id: int
    decision: Decision
