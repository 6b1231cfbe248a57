import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.app.tasks.expired_session_task import ExpiredSessionTask


def scope_for(service):
    @asynccontextmanager
    async def scope():
        yield service

    return scope


@pytest.mark.asyncio
async def test_run_once_sweeps():
    service = MagicMock()
    service.delete_expired_sessions = AsyncMock(return_value=2)

    deleted = await ExpiredSessionTask(scope_for(service)).run_once()

    assert deleted == 2


@pytest.mark.asyncio
async def test_loop_survives_database_errors_and_stops():
    calls = []

    async def sweep():
        calls.append(1)
        if len(calls) == 1:
            raise OperationalError("DELETE", {}, Exception("locked"))
        return 0

    service = MagicMock()
    service.delete_expired_sessions = sweep
    task = ExpiredSessionTask(scope_for(service), interval_seconds=0.01)

    task.start()
    await asyncio.sleep(0.05)
    await task.stop()

    assert len(calls) >= 2
    assert task._task is None


@pytest.mark.asyncio
async def test_loop_survives_unexpected_errors():
    calls = []

    async def sweep():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return 0

    service = MagicMock()
    service.delete_expired_sessions = sweep
    task = ExpiredSessionTask(scope_for(service), interval_seconds=0.01)

    task.start()
    await asyncio.sleep(0.05)

    assert not task._task.done()
    await task.stop()
    assert len(calls) >= 2


@pytest.mark.asyncio
async def test_stop_without_start():
    await ExpiredSessionTask(scope_for(MagicMock())).stop()
