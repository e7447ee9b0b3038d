"""Pydantic schemas for Employee / Department / Login."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import field_validator

from app.schemas.base import CamelModel, RequestModel, normalise_email

Role = Literal["admin", "supervisor", "staff"]


# ── Employee ────────────────────────────────────────────────────────
class EmployeeCreate(RequestModel):
    name: str
    email: str
    role: Role = "staff"
    department_id: int | None = None
    supervisor_id: int | None = None
    phone: str | None = None
    join_date: date | None = None
    password: str | None = None
    leave_quota: int = 12

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return normalise_email(v)


class EmployeeUpdate(RequestModel):
    name: str | None = None
    email: str | None = None
    role: Role | None = None
    department_id: int | None = None
    supervisor_id: int | None = None
    phone: str | None = None
    join_date: date | None = None
    leave_quota: int | None = None

    # Omitting these fields keeps the stored value; an explicit null is invalid.
    @field_validator("name", "role", "leave_quota")
    @classmethod
    def _not_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field may be omitted but not null")
        return v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Field may be omitted but not null")
        return normalise_email(v)


class EmployeeRead(CamelModel):
    """Profile view returned by login, barcode scan and CRUD reads."""

    id: int
    name: str
    email: str
    role: str
    position: str
    department_id: int | None
    department_name: str | None
    supervisor_id: int | None
    phone: str | None
    join_date: date | None
    status: str
    leave_quota: int
    used_leave: int
    created_at: datetime | None


# ── Department ──────────────────────────────────────────────────────
class DepartmentCreate(RequestModel):
    name: str
    description: str | None = None
    manager: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        if not v:
            raise ValueError("Department name must not be empty")
        return v


class DepartmentRead(CamelModel):
    id: int
    name: str
    description: str | None
    manager: str | None
    employee_count: int = 0


# ── Login ───────────────────────────────────────────────────────────
class LoginRequest(RequestModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return normalise_email(v)
