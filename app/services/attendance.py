"""
Check-in logic shared by barcode redemption, manual marking and self
clock-in, plus the company-settings helpers it depends on.

One record per (employee, day) is enforced by ``uq_attendance_emp_date``;
a lost insert race is recovered by re-reading and updating the winner's row.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import Conflict, Forbidden, InvalidState
from app.models.attendance import AttendanceRecord
from app.models.company_settings import DEFAULT_COMPANY_SETTINGS, CompanySettings
from app.models.employee import ROLE_SUPERVISOR, Employee
from app.services.employees import require_employee, require_role, supervises, team_filter

logger = logging.getLogger(__name__)

_CHECK_IN_ATTEMPTS = 2


# ── Time helpers ────────────────────────────────────────────────────
def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Normalise a potentially-naive timestamp (SQLite) to UTC-aware."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_offset(tz_offset: str) -> timezone:
    sign = 1 if tz_offset[0] == "+" else -1
    hours, _, minutes = tz_offset[1:].partition(":")
    return timezone(sign * timedelta(hours=int(hours), minutes=int(minutes or 0)))


def local_date_key(now: datetime, tz_offset: str) -> str:
    """Calendar day (YYYY-MM-DD) of *now* in the company timezone."""
    return ensure_utc(now).astimezone(parse_offset(tz_offset)).strftime("%Y-%m-%d")


def is_late(check_in: datetime, work_start: str, threshold_minutes: int, tz_offset: str) -> bool:
    """Check whether *check_in* falls after work_start + threshold, local time."""
    local_time = ensure_utc(check_in).astimezone(parse_offset(tz_offset))
    start_hour, start_min = (int(p) for p in work_start.split(":"))
    cutoff = local_time.replace(
        hour=start_hour, minute=start_min, second=0, microsecond=0
    ) + timedelta(minutes=threshold_minutes)
    return local_time > cutoff


async def load_company_settings(db: AsyncSession) -> CompanySettings:
    """Return the settings row, or an unsaved default when none exists yet."""
    result = await db.execute(select(CompanySettings).limit(1))
    company = result.scalar_one_or_none()
    if company is None:
        company = CompanySettings(id=1, **DEFAULT_COMPANY_SETTINGS)
    return company


# ── Check-in ────────────────────────────────────────────────────────
async def _today_record(db: AsyncSession, employee_id: int, today: str) -> AttendanceRecord | None:
    result = await db.execute(
        select(AttendanceRecord)
        .where(AttendanceRecord.employee_id == employee_id, AttendanceRecord.date == today)
        .with_for_update()
    )
    return result.scalar_one_or_none()


async def record_check_in(
    db: AsyncSession,
    employee_id: int,
    status: str | None = None,
    *,
    now: datetime | None = None,
) -> AttendanceRecord:
    """Create today's record, or update the existing one in place.

    An existing check-in time is never overwritten. Without a status
    override an existing record keeps its status; a new one is "present".
    """
    now = now or utcnow()
    company = await load_company_settings(db)
    today = local_date_key(now, company.timezone_offset)

    for _ in range(_CHECK_IN_ATTEMPTS):
        record = await _today_record(db, employee_id, today)
        if record is None:
            record = AttendanceRecord(
                employee_id=employee_id,
                date=today,
                check_in=now,
                status=status or "present",
            )
            db.add(record)
        else:
            if status is not None:
                record.status = status
            if record.check_in is None:
                record.check_in = now

        try:
            await db.commit()
        except IntegrityError:
            # Another request created today's row first; update that one.
            await db.rollback()
            logger.info("Check-in race for employee %d on %s, retrying", employee_id, today)
            continue

        await db.refresh(record)
        logger.info(
            "Check-in recorded for employee %d on %s (status %s)",
            employee_id, today, record.status,
        )
        return record

    raise Conflict("Could not record attendance, please retry")


async def mark_manual(
    db: AsyncSession,
    supervisor_id: int,
    employee_id: int,
    status: str | None = None,
    *,
    now: datetime | None = None,
) -> AttendanceRecord:
    """Supervisor-initiated check-in for a member of their team."""
    supervisor = await require_role(
        db, supervisor_id, (ROLE_SUPERVISOR,), "Only supervisors can mark attendance manually"
    )
    target = await require_employee(db, employee_id)
    if not supervises(supervisor, target):
        logger.warning(
            "Supervisor %d tried to mark attendance for employee %d outside their team",
            supervisor_id, employee_id,
        )
        raise Forbidden("Employee is not on this supervisor's team")
    return await record_check_in(db, employee_id, status, now=now)


# ── Self clock-in / clock-out ───────────────────────────────────────
async def clock_in(db: AsyncSession, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
    now = now or utcnow()
    await require_employee(db, employee_id)
    company = await load_company_settings(db)

    existing = await _today_record(db, employee_id, local_date_key(now, company.timezone_offset))
    if existing is not None and existing.check_in is not None:
        raise InvalidState("Already clocked in today")

    late = is_late(now, company.work_start, company.late_threshold_minutes, company.timezone_offset)
    return await record_check_in(db, employee_id, "late" if late else "present", now=now)


async def clock_out(db: AsyncSession, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
    now = now or utcnow()
    await require_employee(db, employee_id)
    company = await load_company_settings(db)

    record = await _today_record(db, employee_id, local_date_key(now, company.timezone_offset))
    if record is None or record.check_in is None:
        raise InvalidState("No clock-in recorded for today")
    if record.check_out is not None:
        raise InvalidState("Already clocked out today")

    record.check_out = now
    await db.commit()
    await db.refresh(record)
    logger.info("Clock-out recorded for employee %d on %s", employee_id, record.date)
    return record


# ── Queries ─────────────────────────────────────────────────────────
async def list_attendance(
    db: AsyncSession, *, employee_id: int | None = None, date: str | None = None
) -> list[AttendanceRecord]:
    query = select(AttendanceRecord).order_by(AttendanceRecord.date.desc(), AttendanceRecord.id)
    if employee_id is not None:
        query = query.where(AttendanceRecord.employee_id == employee_id)
    if date is not None:
        query = query.where(AttendanceRecord.date == date)
    result = await db.execute(query)
    return list(result.scalars().all())


async def team_attendance(
    db: AsyncSession, supervisor_id: int, *, date: str | None = None
) -> list[AttendanceRecord]:
    supervisor = await require_role(
        db, supervisor_id, (ROLE_SUPERVISOR,), "Only supervisors have a team"
    )
    query = (
        select(AttendanceRecord)
        .join(Employee, Employee.id == AttendanceRecord.employee_id)
        .where(team_filter(supervisor))
        .order_by(AttendanceRecord.date.desc(), Employee.name)
    )
    if date is not None:
        query = query.where(AttendanceRecord.date == date)
    result = await db.execute(query)
    return list(result.scalars().all())
