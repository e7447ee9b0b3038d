"""
Work shift model — named start/end time template, optionally per department.
"""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String

from app.db.base import Base


class WorkShift(Base):
    __tablename__ = "work_shifts"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    # HH:MM
    start_time: str = Column(String(5), nullable=False)  # type: ignore[assignment]
    end_time: str = Column(String(5), nullable=False)  # type: ignore[assignment]
    department_id: int | None = Column(Integer, ForeignKey("departments.id"), nullable=True)  # type: ignore[assignment]
