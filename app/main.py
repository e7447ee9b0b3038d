"""
Absensi attendance service — application entry point.

This is the **only** file that assembles the app. Business logic lives
in the `services/` package; `api/` is a thin HTTP layer over it.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from app.api.v1.api import api_router
from app.api.v1.endpoints.auth import limiter
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from app.models.attendance import AttendanceRecord  # noqa: F401
from app.models.barcode import Barcode  # noqa: F401
from app.models.company_settings import DEFAULT_COMPANY_SETTINGS, CompanySettings
from app.models.employee import ROLE_ADMIN, Department, Employee  # noqa: F401
from app.models.requests import LeaveRequest, OvertimeRequest  # noqa: F401
from app.models.work_shift import WorkShift  # noqa: F401
from app.services.fallback_cache import FallbackCache

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    async with async_session_factory() as session:
        # Seed default admin on first run
        result = await session.execute(
            select(Employee).where(Employee.email == settings.FIRST_ADMIN_EMAIL)
        )
        if result.scalar_one_or_none() is None:
            session.add(
                Employee(
                    name="System Administrator",
                    email=settings.FIRST_ADMIN_EMAIL,
                    role=ROLE_ADMIN,
                    hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                )
            )
            logger.info("Default admin created: %s (password: <redacted>)", settings.FIRST_ADMIN_EMAIL)

        # Seed company settings singleton
        if (await session.execute(select(CompanySettings).limit(1))).scalar_one_or_none() is None:
            session.add(CompanySettings(id=1, **DEFAULT_COMPANY_SETTINGS))
            logger.info("Default company settings created")

        await session.commit()

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    _app.state.fallback_cache.clear()
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Employee attendance, barcode check-in and leave/overtime approvals",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Per-process degraded-mode snapshots; empty after every restart
    application.state.fallback_cache = FallbackCache(settings.FALLBACK_CACHE_TTL_SECONDS)
    application.state.limiter = limiter

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return application


app = create_app()
