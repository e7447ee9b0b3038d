"""
Password hashing (bcrypt) and attendance barcode code generation.
"""

from __future__ import annotations

import secrets

from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


# ── Barcodes ────────────────────────────────────────────────────────
def generate_barcode_code() -> str:
    """Return an unguessable URL-safe code with BARCODE_CODE_BYTES of entropy."""
    return secrets.token_urlsafe(settings.BARCODE_CODE_BYTES)


def mask_code(code: str) -> str:
    """Shorten a barcode code for log lines."""
    return f"{code[:6]}..." if len(code) > 6 else "..."
