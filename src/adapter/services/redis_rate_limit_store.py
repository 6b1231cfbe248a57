"""
Redis-backed failed-attempt counters, shared by every service instance.

Each key is a hash {count, last_attempt}; increment runs HINCRBY + HSET +
EXPIRE in one MULTI block so concurrent failures are counted exactly once,
and the record disappears by itself once the lockout window has passed.
"""

from datetime import datetime
from typing import Callable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from src.app.errors import UpstreamError
from src.app.services.rate_limit_store import IRateLimitStore
from src.domain.base import utcnow
from src.domain.entities import RateLimitRecord


class RedisRateLimitStore(IRateLimitStore):
    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = "login_attempts",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.client = client
        self.key_prefix = key_prefix
        self._clock = clock or utcnow

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}"

    async def get(self, key: str) -> Optional[RateLimitRecord]:
        try:
            data = await self.client.hgetall(self._key(key))
        except RedisError as e:
            raise UpstreamError(f"Rate limit read failed: {e}") from e
        if not data:
            return None
        return RateLimitRecord(
            key=key,
            count=int(data["count"]),
            last_attempt=datetime.fromisoformat(data["last_attempt"]),
        )

    async def increment(self, key: str, window_seconds: int) -> RateLimitRecord:
        now = self._clock()
        redis_key = self._key(key)
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.hincrby(redis_key, "count", 1)
                pipe.hset(redis_key, "last_attempt", now.isoformat())
                pipe.expire(redis_key, window_seconds)
                count, _, _ = await pipe.execute()
        except RedisError as e:
            raise UpstreamError(f"Rate limit write failed: {e}") from e
        return RateLimitRecord(key=key, count=int(count), last_attempt=now)

    async def clear(self, key: str) -> None:
        try:
            await self.client.delete(self._key(key))
        except RedisError as e:
            raise UpstreamError(f"Rate limit clear failed: {e}") from e
