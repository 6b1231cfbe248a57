from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapter.services.memory_cache import InMemoryCache
from src.app.errors import UpstreamError
from src.app.services.user_cache_service import UserCacheService


class TickingClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def failing_cache():
    cache = MagicMock()
    cache.get = AsyncMock(side_effect=UpstreamError("connection refused"))
    cache.set = AsyncMock(side_effect=UpstreamError("connection refused"))
    cache.delete = AsyncMock(side_effect=UpstreamError("connection refused"))
    return cache


@pytest.mark.asyncio
async def test_set_writes_id_and_email_keys(user_cache, user):
    await user_cache.set(user.id, user, refresh_token="a" * 64)

    by_id = await user_cache.get_by_id(user.id)
    by_email = await user_cache.get_by_email("USER@acme.com")
    assert by_id.email == user.email
    assert by_id.refresh_token == "a" * 64
    assert by_email.id == user.id
    assert by_id.to_user() == user


@pytest.mark.asyncio
async def test_set_replaces_previous_entry(user_cache, user):
    await user_cache.set(user.id, user, refresh_token="a" * 64)
    await user_cache.set(user.id, user, refresh_token="b" * 64)

    assert (await user_cache.get_by_id(user.id)).refresh_token == "b" * 64


@pytest.mark.asyncio
async def test_miss_is_none(user_cache):
    assert await user_cache.get_by_id("missing") is None
    assert await user_cache.get_by_email("missing@acme.com") is None


@pytest.mark.asyncio
async def test_entries_expire(user):
    clock = TickingClock()
    service = UserCacheService(InMemoryCache(clock=clock), default_ttl=60)
    await service.set(user.id, user)

    clock.now = 59.0
    assert await service.get_by_id(user.id) is not None
    clock.now = 60.0
    assert await service.get_by_id(user.id) is None


@pytest.mark.asyncio
async def test_set_purges_expired_entries():
    clock = TickingClock()
    cache = InMemoryCache(clock=clock)
    for i in range(1000):
        await cache.set(f"user:u{i}", {"id": f"u{i}"}, 60)
    clock.now = 10000.0

    await cache.set("user:fresh", {"id": "fresh"}, 60)

    assert list(cache._entries) == ["user:fresh"]


@pytest.mark.asyncio
async def test_invalidate_drops_both_keys(user_cache, user):
    await user_cache.set(user.id, user)

    await user_cache.invalidate(user.id)

    assert await user_cache.get_by_id(user.id) is None
    assert await user_cache.get_by_email(user.email) is None


@pytest.mark.asyncio
async def test_malformed_entry_reads_as_absent(cache, user_cache):
    await cache.set("user:broken", {"email": "no-id@acme.com"}, 60)

    assert await user_cache.get_by_id("broken") is None


@pytest.mark.asyncio
async def test_cache_failures_are_advisory(failing_cache, user):
    service = UserCacheService(failing_cache)

    assert await service.get_by_id(user.id) is None
    assert await service.get_by_email(user.email) is None
    await service.set(user.id, user)
    await service.invalidate(user.id)

    failing_cache.set.assert_called_once()
    failing_cache.delete.assert_called_once()
