import asyncio
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapter.services.memory_rate_limit_store import InMemoryRateLimitStore
from src.app.services.rate_limit_service import RateLimitService
from src.domain.entities import RateLimitRecord


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 1, 1, 12, 0, 0))


@pytest.fixture
def limiter(clock):
    return RateLimitService(InMemoryRateLimitStore(clock=clock), clock=clock)


@pytest.mark.asyncio
async def test_unknown_key_is_allowed(limiter):
    result = await limiter.check_rate_limit("user@acme.com")

    assert result.is_ok()


@pytest.mark.asyncio
async def test_four_failures_do_not_lock(limiter):
    for _ in range(4):
        await limiter.record_failed_attempt("user@acme.com")

    result = await limiter.check_rate_limit("user@acme.com")

    assert result.is_ok()


@pytest.mark.asyncio
async def test_fifth_failure_locks_with_retry_after(limiter, clock):
    for _ in range(5):
        await limiter.record_failed_attempt("user@acme.com")
    clock.advance(60)

    result = await limiter.check_rate_limit("user@acme.com")

    assert result.is_err()
    assert result.error.code == "RATE_LIMITED"
    assert result.error.details["retry_after"] == 840
    assert result.error.message == "Too many login attempts. Please try again in 840 seconds."


@pytest.mark.asyncio
async def test_retry_after_rounds_up(limiter, clock):
    for _ in range(5):
        await limiter.record_failed_attempt("user@acme.com")
    clock.now += timedelta(milliseconds=500)

    result = await limiter.check_rate_limit("user@acme.com")

    assert result.error.details["retry_after"] == 900


@pytest.mark.asyncio
async def test_lock_lifts_after_window_and_record_is_cleared(limiter, clock):
    for _ in range(5):
        await limiter.record_failed_attempt("user@acme.com")
    clock.advance(15 * 60)

    result = await limiter.check_rate_limit("user@acme.com")

    assert result.is_ok()
    assert await limiter.store.get("user@acme.com") is None


@pytest.mark.asyncio
async def test_clear_resets_counter(limiter):
    for _ in range(5):
        await limiter.record_failed_attempt("user@acme.com")

    await limiter.clear_rate_limit("user@acme.com")

    assert (await limiter.check_rate_limit("user@acme.com")).is_ok()
    assert await limiter.record_failed_attempt("user@acme.com") == 1


@pytest.mark.asyncio
async def test_keys_are_independent(limiter):
    for _ in range(5):
        await limiter.record_failed_attempt("a@acme.com")

    assert (await limiter.check_rate_limit("a@acme.com")).is_err()
    assert (await limiter.check_rate_limit("b@acme.com")).is_ok()


@pytest.mark.asyncio
async def test_old_failures_expire_before_a_new_one(limiter, clock):
    for _ in range(4):
        await limiter.record_failed_attempt("user@acme.com")
    clock.advance(30 * 24 * 3600)

    assert await limiter.record_failed_attempt("user@acme.com") == 1
    assert (await limiter.check_rate_limit("user@acme.com")).is_ok()


@pytest.mark.asyncio
async def test_expired_records_are_evicted_on_increment(limiter, clock):
    for i in range(1000):
        await limiter.record_failed_attempt(f"user{i}@acme.com")
    clock.advance(365 * 24 * 3600)

    await limiter.record_failed_attempt("fresh@acme.com")

    assert list(limiter.store._records) == ["fresh@acme.com"]


@pytest.mark.asyncio
async def test_concurrent_failures_each_count_once(limiter):
    await asyncio.gather(*(limiter.record_failed_attempt("user@acme.com") for _ in range(50)))

    record = await limiter.store.get("user@acme.com")
    assert record.count == 50


@pytest.mark.asyncio
async def test_elapsed_lock_does_not_clear_the_store(clock):
    store = MagicMock()
    store.get = AsyncMock(
        return_value=RateLimitRecord(
            key="user@acme.com", count=5, last_attempt=clock() - timedelta(minutes=16)
        )
    )
    store.clear = AsyncMock()
    limiter = RateLimitService(store, clock=clock)

    result = await limiter.check_rate_limit("user@acme.com")

    assert result.is_ok()
    store.clear.assert_not_awaited()
