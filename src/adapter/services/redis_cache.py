"""
Redis-backed cache shared across service instances.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from src.app.errors import UpstreamError
from src.app.services.cache import ICache

logger = logging.getLogger(__name__)


class RedisCache(ICache):
    def __init__(self, client: redis.Redis, key_prefix: str = "auth"):
        self.client = client
        self.key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        try:
            data = await self.client.get(self._key(key))
        except RedisError as e:
            raise UpstreamError(f"Cache read failed: {e}") from e
        if data is None:
            return None
        try:
            return json.loads(data)
        except ValueError as e:
            raise UpstreamError(f"Cache entry {key} is not valid JSON") from e

    async def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self.client.setex(self._key(key), ttl, json.dumps(value, default=str))
        except RedisError as e:
            raise UpstreamError(f"Cache write failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(self._key(key))
        except RedisError as e:
            raise UpstreamError(f"Cache delete failed: {e}") from e
