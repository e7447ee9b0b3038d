"""Pydantic schemas for company settings, work shifts and health."""

from __future__ import annotations

import re

from pydantic import field_validator

from app.schemas.base import CamelModel, RequestModel, validate_hhmm

_TZ_RE = re.compile(r"^[+-]\d{2}:\d{2}$")


# ── Company settings ────────────────────────────────────────────────
class CompanySettingsRead(CamelModel):
    company_name: str
    work_start: str
    work_end: str
    late_threshold_minutes: int
    timezone_offset: str


class CompanySettingsUpdate(RequestModel):
    company_name: str | None = None
    work_start: str | None = None
    work_end: str | None = None
    late_threshold_minutes: int | None = None
    timezone_offset: str | None = None

    @field_validator("work_start", "work_end")
    @classmethod
    def _hhmm(cls, v: str | None) -> str | None:
        return validate_hhmm(v) if v is not None else v

    @field_validator("late_threshold_minutes")
    @classmethod
    def _threshold(cls, v: int | None) -> int | None:
        if v is not None and not 0 <= v <= 240:
            raise ValueError("lateThresholdMinutes must be between 0 and 240")
        return v

    @field_validator("timezone_offset")
    @classmethod
    def _tz(cls, v: str | None) -> str | None:
        if v is not None and not _TZ_RE.match(v):
            raise ValueError("timezoneOffset must look like +07:00")
        return v


# ── Work shifts ─────────────────────────────────────────────────────
class WorkShiftCreate(RequestModel):
    name: str
    start_time: str
    end_time: str
    department_id: int | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _hhmm(cls, v: str) -> str:
        return validate_hhmm(v)


class WorkShiftRead(CamelModel):
    id: int
    name: str
    start_time: str
    end_time: str
    department_id: int | None


# ── Health / generic ───────────────────────────────────────────────
class HealthResponse(CamelModel):
    db: bool
    fallback_entries: int


class DeleteResponse(CamelModel):
    success: bool
    message: str
