"""Tests for department endpoints."""

import pytest
from httpx import AsyncClient

from app.models.employee import Employee

API = "/api/v1"


@pytest.mark.asyncio
async def test_list_departments_with_head_count(async_client: AsyncClient, org):
    resp = await async_client.get(f"{API}/departments")
    assert resp.status_code == 200
    counts = {d["name"]: d["employeeCount"] for d in resp.json()}
    assert counts == {"HR": 2, "IT": 2}
    assert "X-Degraded-Mode" not in resp.headers


@pytest.mark.asyncio
async def test_create_department(async_client: AsyncClient, org):
    resp = await async_client.post(
        f"{API}/departments",
        json={"name": "Finance", "manager": "Dewi"},
        headers=org.admin_headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Finance"
    assert data["employeeCount"] == 0


@pytest.mark.asyncio
async def test_create_duplicate_department(async_client: AsyncClient, org):
    resp = await async_client.post(f"{API}/departments", json={"name": "IT"}, headers=org.admin_headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_create_department_requires_admin(async_client: AsyncClient, org):
    resp = await async_client.post(
        f"{API}/departments", json={"name": "Legal"}, headers={"X-Actor-Id": str(org.staff)}
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_delete_department_with_active_employees(async_client: AsyncClient, org):
    resp = await async_client.delete(f"{API}/departments/{org.it}", headers=org.admin_headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_delete_department_after_team_leaves(async_client: AsyncClient, org, seed):
    for employee_id in (org.hr_staff, org.hr_supervisor):
        await async_client.delete(f"{API}/employees/{employee_id}", headers=org.admin_headers)

    resp = await async_client.delete(f"{API}/departments/{org.hr}", headers=org.admin_headers)
    assert resp.status_code == 200
    assert "HR" in resp.json()["message"]

    listed = await async_client.get(f"{API}/departments")
    assert [d["name"] for d in listed.json()] == ["IT"]

    former = (await seed.all(Employee, Employee.id == org.hr_staff))[0]
    assert former.department_id is None


@pytest.mark.asyncio
async def test_delete_unknown_department(async_client: AsyncClient, org):
    resp = await async_client.delete(f"{API}/departments/999", headers=org.admin_headers)
    assert resp.status_code == 404
