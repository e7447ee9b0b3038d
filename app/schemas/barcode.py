"""Pydantic schemas for attendance barcodes."""

from __future__ import annotations

from datetime import datetime

from pydantic import field_validator

from app.schemas.base import CamelModel, RequestModel, normalise_email


class BarcodeGenerateRequest(RequestModel):
    supervisor_id: int


class BarcodeScanRequest(RequestModel):
    code: str
    staff_email: str

    @field_validator("code")
    @classmethod
    def _code(cls, v: str) -> str:
        if not v or len(v) > 64:
            raise ValueError("Barcode code must be 1-64 characters")
        return v

    @field_validator("staff_email")
    @classmethod
    def _email(cls, v: str) -> str:
        return normalise_email(v)


class BarcodeRead(CamelModel):
    id: int
    code: str
    supervisor_id: int
    department_id: int
    created_at: datetime | None
    expires_at: datetime
    is_active: bool


class BarcodeGenerateResponse(CamelModel):
    barcode: BarcodeRead
    department: str
