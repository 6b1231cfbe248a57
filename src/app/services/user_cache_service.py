"""
User Cache Service

Cache-aside snapshots of directory users. The cache is advisory: a miss
or a cache failure reads as "absent", and write failures are logged and
dropped. Callers fall back to the directory themselves.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from src.app.errors import UpstreamError
from src.app.services.cache import ICache
from src.domain.entities import CachedUser, User

logger = logging.getLogger(__name__)

DEFAULT_USER_TTL = 24 * 60 * 60


def _id_key(user_id: str) -> str:
    return f"user:{user_id}"


def _email_key(email: str) -> str:
    return f"user:email:{email.lower()}"


class UserCacheService:
    def __init__(self, cache: ICache, default_ttl: int = DEFAULT_USER_TTL):
        self.cache = cache
        self.default_ttl = default_ttl

    async def get_by_id(self, user_id: str) -> Optional[CachedUser]:
        return await self._read(_id_key(user_id))

    async def get_by_email(self, email: str) -> Optional[CachedUser]:
        return await self._read(_email_key(email))

    async def set(
        self,
        user_id: str,
        user: User,
        refresh_token: Optional[str] = None,
        ttl: Optional[int] = None,
    ) -> None:
        """Write a snapshot under both the id and email keys, replacing any prior entry"""
        entry = CachedUser(**user.model_dump(exclude={"refresh_token"}), refresh_token=refresh_token)
        payload = entry.model_dump(mode="json")
        ttl = ttl or self.default_ttl
        try:
            await self.cache.set(_id_key(user_id), payload, ttl)
            await self.cache.set(_email_key(user.email), payload, ttl)
        except UpstreamError as e:
            logger.warning("User cache write failed for %s: %s", user_id, e)

    async def invalidate(self, user_id: str) -> None:
        entry = await self.get_by_id(user_id)
        try:
            await self.cache.delete(_id_key(user_id))
            if entry is not None:
                await self.cache.delete(_email_key(entry.email))
        except UpstreamError as e:
            logger.warning("User cache invalidation failed for %s: %s", user_id, e)

    async def _read(self, key: str) -> Optional[CachedUser]:
        try:
            raw = await self.cache.get(key)
        except UpstreamError as e:
            logger.warning("User cache read failed for %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return CachedUser.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding malformed user cache entry %s", key)
            return None
