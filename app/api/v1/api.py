"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (attendance, auth, barcode, departments, employees,
                                  health, requests, settings, shifts)

api_router = APIRouter()

# Login
api_router.include_router(auth.router)

# Barcode check-in and attendance
api_router.include_router(barcode.router)
api_router.include_router(attendance.router)

# Leave / overtime approval workflow
api_router.include_router(requests.router)

# Organisation data
api_router.include_router(employees.router)
api_router.include_router(departments.router)
api_router.include_router(shifts.router)
api_router.include_router(settings.router)

# Health
api_router.include_router(health.router)
