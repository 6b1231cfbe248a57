"""
Expired Session Task

Periodic sweep that deletes expired and abandoned (pending) sessions.
Runs alongside request traffic; every delete is idempotent, so racing a
logout or a refresh is harmless.
"""

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from typing import Callable, Optional

from src.app.services.session_service import SessionService

logger = logging.getLogger(__name__)

SessionServiceScope = Callable[[], AbstractAsyncContextManager[SessionService]]


class ExpiredSessionTask:
    def __init__(self, scope: SessionServiceScope, interval_seconds: float = 10):
        self.scope = scope
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    async def run_once(self) -> int:
        async with self.scope() as sessions:
            return await sessions.delete_expired_sessions()

    async def _loop(self):
        while True:
            try:
                await self.run_once()
            except Exception:
                logger.exception("Expired session sweep failed")
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self._task is None or self._task.done():
            logger.info("Starting expired session sweep every %ss", self.interval_seconds)
            self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
