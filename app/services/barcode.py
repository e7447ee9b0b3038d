"""
Attendance barcode issuance and redemption.

A supervisor holds at most one active barcode. Issuing deactivates the old
one and inserts the new one in a single transaction; the partial unique
index ``uq_barcode_active_supervisor`` makes a concurrent issuer fail and
retry instead of leaving two active rows.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (Conflict, DepartmentMismatch, InvalidOrExpiredToken,
                                 InvalidState, NotFound, StaffNotFound)
from app.core.security import generate_barcode_code, mask_code
from app.models.barcode import Barcode
from app.models.employee import ROLE_SUPERVISOR, Employee
from app.services.attendance import ensure_utc, record_check_in, utcnow
from app.services.employees import get_active_staff_by_email, get_employee, require_role

logger = logging.getLogger(__name__)

_ISSUE_ATTEMPTS = 3


def is_redeemable(barcode: Barcode, now: datetime) -> bool:
    return bool(barcode.is_active) and now < ensure_utc(barcode.expires_at)


async def issue_token(
    db: AsyncSession, supervisor_id: int, *, now: datetime | None = None
) -> tuple[Barcode, str]:
    """Mint a fresh barcode for the supervisor's department.

    Returns the new barcode and the department name.
    """
    supervisor = await require_role(
        db, supervisor_id, (ROLE_SUPERVISOR,), "Only supervisors can generate attendance barcodes"
    )
    if supervisor.department_id is None:
        raise InvalidState("Supervisor has no department assigned")

    # Plain values: a rollback below expires the ORM instance.
    department_id = supervisor.department_id
    department_name = supervisor.department_name or ""

    for _ in range(_ISSUE_ATTEMPTS):
        issued_at = now or utcnow()
        await db.execute(
            update(Barcode)
            .where(Barcode.supervisor_id == supervisor_id, Barcode.is_active.is_(True))
            .values(is_active=False)
        )
        barcode = Barcode(
            code=generate_barcode_code(),
            supervisor_id=supervisor_id,
            department_id=department_id,
            created_at=issued_at,
            expires_at=issued_at + timedelta(minutes=settings.BARCODE_VALIDITY_MINUTES),
            is_active=True,
        )
        db.add(barcode)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("Concurrent barcode issuance for supervisor %d, retrying", supervisor_id)
            continue

        await db.refresh(barcode)
        logger.info(
            "Barcode %s issued by supervisor %d for %s, expires %s",
            mask_code(barcode.code), supervisor_id, department_name,
            barcode.expires_at.isoformat(),
        )
        return barcode, department_name

    raise Conflict("Could not issue barcode, please retry")


async def get_active_token(
    db: AsyncSession, supervisor_id: int, *, now: datetime | None = None
) -> Barcode:
    now = now or utcnow()
    result = await db.execute(
        select(Barcode)
        .where(Barcode.supervisor_id == supervisor_id, Barcode.is_active.is_(True))
        .order_by(Barcode.created_at.desc())
        .limit(1)
    )
    barcode = result.scalar_one_or_none()
    if barcode is None or not is_redeemable(barcode, now):
        raise NotFound("No active barcode for this supervisor")
    return barcode


async def redeem_token(
    db: AsyncSession, code: str, staff_email: str, *, now: datetime | None = None
) -> Employee:
    """Check a staff member in with a supervisor's barcode.

    The barcode itself is not consumed; any number of staff from its
    department may use it until it expires or is superseded.
    """
    now = now or utcnow()

    result = await db.execute(select(Barcode).where(Barcode.code == code))
    barcode = result.scalar_one_or_none()
    if barcode is None or not is_redeemable(barcode, now):
        logger.warning("Rejected barcode %s: invalid or expired", mask_code(code))
        raise InvalidOrExpiredToken()

    staff = await get_active_staff_by_email(db, staff_email)
    if staff is None:
        logger.warning("Rejected barcode %s: no active staff for email", mask_code(code))
        raise StaffNotFound()
    if staff.department_id != barcode.department_id:
        logger.warning(
            "Rejected barcode %s: staff %d outside department %d",
            mask_code(code), staff.id, barcode.department_id,
        )
        raise DepartmentMismatch()

    staff_id = staff.id
    await record_check_in(db, staff_id, now=now)
    return await get_employee(db, staff_id, fresh=True)  # type: ignore[return-value]
