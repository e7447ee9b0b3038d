"""
Leave & overtime request models — pending / approved / rejected lifecycle.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, Integer, String

from app.db.base import Base

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"

LEAVE_TYPES = ("annual", "sick", "personal")


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, nullable=False, index=True)  # type: ignore[assignment]
    # annual | sick | personal
    type: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    start_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    end_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    reason: str | None = Column(String(1000), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(20), nullable=False, default=STATUS_PENDING, index=True)  # type: ignore[assignment]
    approver_id: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    decided_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1


class OvertimeRequest(Base):
    __tablename__ = "overtime_requests"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, nullable=False, index=True)  # type: ignore[assignment]
    date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    # HH:MM
    start_time: str = Column(String(5), nullable=False)  # type: ignore[assignment]
    end_time: str = Column(String(5), nullable=False)  # type: ignore[assignment]
    hours: float = Column(Float, nullable=False)  # type: ignore[assignment]
    reason: str | None = Column(String(1000), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(20), nullable=False, default=STATUS_PENDING, index=True)  # type: ignore[assignment]
    approver_id: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    decided_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
