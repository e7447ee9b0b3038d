"""
Employee & Department models — identity, role and organisational unit.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base

ROLE_ADMIN = "admin"
ROLE_SUPERVISOR = "supervisor"
ROLE_STAFF = "staff"
ROLES = (ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_STAFF)

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"


class Department(Base):
    __tablename__ = "departments"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(100), unique=True, nullable=False)  # type: ignore[assignment]
    description: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    manager: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]

    employees = relationship("Employee", back_populates="department")


class Employee(Base):
    __tablename__ = "employees"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    role: str = Column(String(20), nullable=False, default=ROLE_STAFF)  # type: ignore[assignment]
    # admin | supervisor | staff
    department_id: int | None = Column(  # type: ignore[assignment]
        Integer, ForeignKey("departments.id"), nullable=True, index=True
    )
    supervisor_id: int | None = Column(  # type: ignore[assignment]
        Integer, ForeignKey("employees.id"), nullable=True, index=True
    )
    phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    join_date: date | None = Column(Date, nullable=True)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20), nullable=False, default=STATUS_ACTIVE, server_default=STATUS_ACTIVE
    )
    hashed_password: str | None = Column(String(128), nullable=True)  # type: ignore[assignment]
    leave_quota: int = Column(Integer, nullable=False, default=12)  # type: ignore[assignment]
    used_leave: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    department = relationship("Department", back_populates="employees", lazy="joined")

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    @property
    def department_name(self) -> str | None:
        return self.department.name if self.department is not None else None

    @property
    def position(self) -> str:
        return self.role.capitalize()
