"""
Degraded-mode snapshots for read-only listings.

One ``FallbackCache`` lives on ``app.state`` for the lifetime of the process.
It only ever serves listings (departments, employees) when the database is
unreachable; tokens, attendance and approvals always go to the database.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.exc import InterfaceError, OperationalError

logger = logging.getLogger(__name__)

CONNECTIVITY_ERRORS = (OperationalError, InterfaceError, ConnectionError, TimeoutError)


class FallbackCache:
    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def put(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock() + self._ttl, value)

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires, value = entry
        if self._clock() >= expires:
            del self._entries[key]
            return None
        return value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


async def read_through(
    cache: FallbackCache, key: str, loader: Callable[[], Awaitable[Any]]
) -> tuple[Any, bool]:
    """Run *loader*, snapshotting its result; on a connectivity error serve
    the last snapshot instead.

    Returns ``(value, degraded)``. Without a snapshot the error propagates.
    """
    try:
        value = await loader()
    except CONNECTIVITY_ERRORS as exc:
        snapshot = cache.get(key)
        if snapshot is None:
            raise
        logger.warning("Database unreachable (%s); serving cached %s", exc.__class__.__name__, key)
        return snapshot, True
    cache.put(key, value)
    return value, False
