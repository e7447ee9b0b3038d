"""
Shared test fixtures for the attendance service test suite.

Each test gets its own in-memory SQLite database (aiosqlite + StaticPool)
wired into the app through a ``get_db`` override.
"""

import os
import sys
from types import SimpleNamespace
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'

from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.deps import get_db
from app.api.v1.endpoints.auth import limiter
from app.core.security import get_password_hash
from app.db.base import Base
from app.main import app
from app.models.employee import Department, Employee

API = "/api/v1"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for calling services directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app and the test database."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    app.state.fallback_cache.clear()
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ── Seeding helpers ─────────────────────────────────────────────────
class Seeder:
    """Writes fixtures through short-lived sessions and hands back ids."""

    def __init__(self, factory: async_sessionmaker) -> None:
        self._factory = factory

    async def add(self, obj) -> int:
        async with self._factory() as session:
            session.add(obj)
            await session.commit()
            return obj.id

    async def department(self, name: str) -> int:
        return await self.add(Department(name=name, description=f"{name} department"))

    async def employee(
        self,
        name: str,
        email: str,
        role: str = "staff",
        department_id: int | None = None,
        supervisor_id: int | None = None,
        password: str | None = None,
    ) -> int:
        return await self.add(
            Employee(
                name=name,
                email=email,
                role=role,
                department_id=department_id,
                supervisor_id=supervisor_id,
                hashed_password=get_password_hash(password) if password else None,
            )
        )

    async def all(self, model, *criteria) -> list:
        async with self._factory() as session:
            result = await session.execute(select(model).where(*criteria))
            return list(result.scalars().all())


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)


@pytest.fixture
async def org(seed: Seeder) -> SimpleNamespace:
    """IT and HR departments, one supervisor each, staff in both, one admin."""
    it = await seed.department("IT")
    hr = await seed.department("HR")
    admin = await seed.employee("Admin", "admin@company.com", role="admin")
    supervisor = await seed.employee("Sari Supervisor", "supervisor@company.com", "supervisor", it)
    hr_supervisor = await seed.employee("Hadi Supervisor", "hr.supervisor@company.com", "supervisor", hr)
    staff = await seed.employee("Budi Staff", "staff@company.com", "staff", it, supervisor)
    hr_staff = await seed.employee("Rina Staff", "hr.staff@company.com", "staff", hr, hr_supervisor)
    return SimpleNamespace(
        it=it,
        hr=hr,
        admin=admin,
        supervisor=supervisor,
        hr_supervisor=hr_supervisor,
        staff=staff,
        hr_staff=hr_staff,
        admin_headers={"X-Actor-Id": str(admin)},
    )
