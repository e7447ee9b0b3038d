"""Tests for barcode issuance, lookup and redemption."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.core.exceptions import InvalidOrExpiredToken
from app.core.security import mask_code
from app.models.attendance import AttendanceRecord
from app.models.barcode import Barcode
from app.services import barcode as barcode_service
from app.services.attendance import utcnow


API = "/api/v1"


async def _generate(client: AsyncClient, supervisor_id: int):
    return await client.post(f"{API}/barcode/generate", json={"supervisorId": supervisor_id})


@pytest.mark.asyncio
async def test_generate_returns_code_and_department(async_client: AsyncClient, org):
    resp = await _generate(async_client, org.supervisor)
    assert resp.status_code == 200
    data = resp.json()
    assert data["department"] == "IT"
    barcode = data["barcode"]
    assert barcode["supervisorId"] == org.supervisor
    assert barcode["departmentId"] == org.it
    assert barcode["isActive"] is True
    # 24 random bytes, base64url encoded
    assert len(barcode["code"]) >= 32


@pytest.mark.asyncio
async def test_generate_sets_configured_validity_window(db_session, org):
    now = utcnow()
    barcode, _ = await barcode_service.issue_token(db_session, org.supervisor, now=now)
    window = barcode.expires_at.replace(tzinfo=None) - barcode.created_at.replace(tzinfo=None)
    assert window == timedelta(minutes=settings.BARCODE_VALIDITY_MINUTES)


@pytest.mark.asyncio
async def test_regenerate_supersedes_previous_barcode(async_client: AsyncClient, org, seed):
    """Issuing again leaves only the newest barcode usable."""
    first = (await _generate(async_client, org.supervisor)).json()["barcode"]["code"]
    second = (await _generate(async_client, org.supervisor)).json()["barcode"]["code"]
    assert first != second

    active = await async_client.get(f"{API}/barcode/{org.supervisor}")
    assert active.status_code == 200
    assert active.json()["code"] == second

    resp = await async_client.post(
        f"{API}/barcode/scan", json={"code": first, "staffEmail": "staff@company.com"}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid or expired barcode"


@pytest.mark.asyncio
async def test_many_issues_leave_exactly_one_active(async_client: AsyncClient, org, seed):
    codes = []
    for _ in range(5):
        resp = await _generate(async_client, org.supervisor)
        codes.append(resp.json()["barcode"]["code"])

    rows = await seed.all(Barcode, Barcode.supervisor_id == org.supervisor)
    assert len(rows) == 5
    active = [b for b in rows if b.is_active]
    assert len(active) == 1
    assert active[0].code == codes[-1]


@pytest.mark.asyncio
async def test_issuing_does_not_touch_other_supervisors(async_client: AsyncClient, org):
    await _generate(async_client, org.supervisor)
    hr_code = (await _generate(async_client, org.hr_supervisor)).json()["barcode"]["code"]
    await _generate(async_client, org.supervisor)

    resp = await async_client.get(f"{API}/barcode/{org.hr_supervisor}")
    assert resp.json()["code"] == hr_code


@pytest.mark.asyncio
async def test_generate_rejects_non_supervisor(async_client: AsyncClient, org, seed):
    resp = await _generate(async_client, org.staff)
    assert resp.status_code == 403
    assert resp.json()["success"] is False
    assert await seed.all(Barcode) == []


@pytest.mark.asyncio
async def test_generate_rejects_unknown_employee(async_client: AsyncClient, org):
    resp = await _generate(async_client, 9999)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_generate_requires_department(async_client: AsyncClient, seed):
    floating = await seed.employee("No Dept", "nodept@company.com", role="supervisor")
    resp = await _generate(async_client, floating)
    assert resp.status_code == 400
    assert "department" in resp.json()["detail"].lower()


@pytest.mark.asyncio
async def test_active_barcode_not_found(async_client: AsyncClient, org):
    resp = await async_client.get(f"{API}/barcode/{org.supervisor}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_scan_checks_staff_in(async_client: AsyncClient, org, seed):
    code = (await _generate(async_client, org.supervisor)).json()["barcode"]["code"]

    resp = await async_client.post(
        f"{API}/barcode/scan", json={"code": code, "staffEmail": "Staff@Company.com "}
    )
    assert resp.status_code == 200
    profile = resp.json()
    assert profile["id"] == org.staff
    assert profile["email"] == "staff@company.com"
    assert profile["departmentName"] == "IT"
    assert profile["position"] == "Staff"

    records = await seed.all(AttendanceRecord, AttendanceRecord.employee_id == org.staff)
    assert len(records) == 1
    assert records[0].status == "present"
    assert records[0].check_in is not None


@pytest.mark.asyncio
async def test_scan_twice_keeps_first_check_in(async_client: AsyncClient, org, seed):
    code = (await _generate(async_client, org.supervisor)).json()["barcode"]["code"]
    body = {"code": code, "staffEmail": "staff@company.com"}

    await async_client.post(f"{API}/barcode/scan", json=body)
    first = (await seed.all(AttendanceRecord, AttendanceRecord.employee_id == org.staff))[0]

    resp = await async_client.post(f"{API}/barcode/scan", json=body)
    assert resp.status_code == 200

    records = await seed.all(AttendanceRecord, AttendanceRecord.employee_id == org.staff)
    assert len(records) == 1
    assert records[0].check_in == first.check_in
    assert records[0].status == "present"


@pytest.mark.asyncio
async def test_barcode_is_reusable_by_several_staff(async_client: AsyncClient, org, seed):
    colleague = await seed.employee("Citra Staff", "citra@company.com", "staff", org.it, org.supervisor)
    code = (await _generate(async_client, org.supervisor)).json()["barcode"]["code"]

    for email in ("staff@company.com", "citra@company.com"):
        resp = await async_client.post(f"{API}/barcode/scan", json={"code": code, "staffEmail": email})
        assert resp.status_code == 200

    ids = {r.employee_id for r in await seed.all(AttendanceRecord)}
    assert ids == {org.staff, colleague}


@pytest.mark.asyncio
async def test_scan_from_other_department_rejected(async_client: AsyncClient, org, seed):
    code = (await _generate(async_client, org.supervisor)).json()["barcode"]["code"]

    resp = await async_client.post(
        f"{API}/barcode/scan", json={"code": code, "staffEmail": "hr.staff@company.com"}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Not authorized for this department"
    assert await seed.all(AttendanceRecord) == []


@pytest.mark.asyncio
async def test_scan_unknown_staff_rejected_like_department_mismatch(async_client: AsyncClient, org):
    code = (await _generate(async_client, org.supervisor)).json()["barcode"]["code"]

    for email in ("ghost@company.com", "supervisor@company.com"):
        resp = await async_client.post(f"{API}/barcode/scan", json={"code": code, "staffEmail": email})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Not authorized for this department"


@pytest.mark.asyncio
async def test_scan_expired_barcode_rejected(async_client: AsyncClient, org, seed):
    """An expired barcode is refused even while still flagged active."""
    past = utcnow() - timedelta(hours=2)
    await seed.add(
        Barcode(
            code="expired-code-000000000000000000",
            supervisor_id=org.supervisor,
            department_id=org.it,
            created_at=past,
            expires_at=past + timedelta(minutes=15),
            is_active=True,
        )
    )

    resp = await async_client.post(
        f"{API}/barcode/scan",
        json={"code": "expired-code-000000000000000000", "staffEmail": "staff@company.com"},
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid or expired barcode"
    assert await seed.all(AttendanceRecord) == []

    lookup = await async_client.get(f"{API}/barcode/{org.supervisor}")
    assert lookup.status_code == 404


@pytest.mark.asyncio
async def test_redeem_at_expiry_instant_rejected(db_session, org):
    issued_at = utcnow() - timedelta(minutes=settings.BARCODE_VALIDITY_MINUTES)
    barcode, _ = await barcode_service.issue_token(db_session, org.supervisor, now=issued_at)

    with pytest.raises(InvalidOrExpiredToken):
        await barcode_service.redeem_token(
            db_session,
            barcode.code,
            "staff@company.com",
            now=issued_at + timedelta(minutes=settings.BARCODE_VALIDITY_MINUTES),
        )


@pytest.mark.asyncio
async def test_scan_unknown_code_rejected(async_client: AsyncClient, org):
    resp = await async_client.post(
        f"{API}/barcode/scan", json={"code": "nope", "staffEmail": "staff@company.com"}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_scan_rejects_unknown_fields(async_client: AsyncClient, org):
    resp = await async_client.post(
        f"{API}/barcode/scan",
        json={"code": "abc", "staffEmail": "staff@company.com", "departmentId": org.it},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_scan_rejects_malformed_email(async_client: AsyncClient):
    resp = await async_client.post(f"{API}/barcode/scan", json={"code": "abc", "staffEmail": "nobody"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_issue_retries_after_code_collision(db_session, org, seed, monkeypatch):
    first, _ = await barcode_service.issue_token(db_session, org.supervisor)
    taken = first.code
    codes = iter([taken, "fresh-code-after-collision-0000"])
    monkeypatch.setattr(barcode_service, "generate_barcode_code", lambda: next(codes))

    barcode, department = await barcode_service.issue_token(db_session, org.supervisor)

    assert barcode.code == "fresh-code-after-collision-0000"
    assert department == "IT"
    rows = await seed.all(Barcode, Barcode.supervisor_id == org.supervisor)
    assert [b.code for b in rows if b.is_active] == ["fresh-code-after-collision-0000"]
    assert len(rows) == 2


def test_mask_code_is_plain_ascii():
    assert mask_code("abcdefghijkl") == "abcdef..."
    assert mask_code("abc") == "..."
    assert mask_code("abcdefghijkl").isascii()
