"""
Attendance barcode model — time-limited check-in credential.

At most one active row per supervisor is enforced by a partial unique
index, so two concurrent issuances cannot both leave an active token.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, text

from app.db.base import Base


class Barcode(Base):
    __tablename__ = "barcodes"
    __table_args__ = (
        Index(
            "uq_barcode_active_supervisor",
            "supervisor_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    code: str = Column(String(64), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    supervisor_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    department_id: int = Column(Integer, ForeignKey("departments.id"), nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    expires_at: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    is_active: bool = Column(Boolean, nullable=False, default=True)  # type: ignore[assignment]
