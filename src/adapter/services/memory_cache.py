"""
In-process TTL cache. For tests and single-instance deployments.
"""

import asyncio
import copy
import time
from typing import Any, Callable, Dict, Optional, Tuple

from src.app.services.cache import ICache


class InMemoryCache(ICache):
    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock or time.monotonic

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        async with self._lock:
            now = self._clock()
            expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (now + ttl, copy.deepcopy(value))

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)
