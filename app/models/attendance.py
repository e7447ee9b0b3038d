"""
Attendance record model — one row per employee per calendar day.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from app.db.base import Base

ATTENDANCE_STATUSES = ("present", "late", "absent", "leave", "sick")


class AttendanceRecord(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_attendance_emp_date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    # No FK: history outlives employee rows.
    employee_id: int = Column(Integer, nullable=False, index=True)  # type: ignore[assignment]
    # YYYY-MM-DD
    date: str = Column(String(10), nullable=False, index=True)  # type: ignore[assignment]
    check_in: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    check_out: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    status: str = Column(String(20), nullable=False, default="present")  # type: ignore[assignment]
    # present | late | absent | leave | sick
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
