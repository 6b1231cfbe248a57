"""
In-process failed-attempt counters. Correct for a single instance only.

Each record expires window_seconds after its last increment, the same way
the Redis store EXPIREs its hash.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from src.app.services.rate_limit_store import IRateLimitStore
from src.domain.base import utcnow
from src.domain.entities import RateLimitRecord


class InMemoryRateLimitStore(IRateLimitStore):
    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._records: Dict[str, Tuple[datetime, RateLimitRecord]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock or utcnow

    def _purge_expired(self, now: datetime) -> None:
        expired = [key for key, (expires_at, _) in self._records.items() if expires_at <= now]
        for key in expired:
            del self._records[key]

    async def get(self, key: str) -> Optional[RateLimitRecord]:
        async with self._lock:
            entry = self._records.get(key)
            if entry is None:
                return None
            expires_at, record = entry
            if expires_at <= self._clock():
                del self._records[key]
                return None
            return record.model_copy()

    async def increment(self, key: str, window_seconds: int) -> RateLimitRecord:
        async with self._lock:
            now = self._clock()
            self._purge_expired(now)
            current = self._records.get(key)
            record = RateLimitRecord(
                key=key,
                count=(current[1].count if current else 0) + 1,
                last_attempt=now,
            )
            self._records[key] = (now + timedelta(seconds=window_seconds), record)
            return record.model_copy()

    async def clear(self, key: str) -> None:
        async with self._lock:
            self._records.pop(key, None)
