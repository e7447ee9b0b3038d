"""
Company settings model — singleton table for admin-configurable rules.

Only one row should ever exist. The admin updates it via the settings API,
and self clock-in reads it to decide late arrivals and the local calendar day.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from app.db.base import Base

DEFAULT_COMPANY_SETTINGS = {
    "company_name": "PT. AbsensiPro Indonesia",
    "work_start": "09:00",
    "work_end": "18:00",
    "late_threshold_minutes": 15,
    "timezone_offset": "+07:00",
}


class CompanySettings(Base):
    __tablename__ = "company_settings"

    id: int = Column(Integer, primary_key=True, default=1)  # type: ignore[assignment]
    company_name: str = Column(String(200), nullable=False, default=DEFAULT_COMPANY_SETTINGS["company_name"])  # type: ignore[assignment]
    work_start: str = Column(String(5), nullable=False, default="09:00")  # type: ignore[assignment]
    work_end: str = Column(String(5), nullable=False, default="18:00")  # type: ignore[assignment]
    late_threshold_minutes: int = Column(Integer, nullable=False, default=15)  # type: ignore[assignment]
    timezone_offset: str = Column(String(6), nullable=False, default="+07:00")  # type: ignore[assignment]
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
