"""
Rate Limit Service

Per-account failed-login counter with a lockout window.
"""

import logging
import math
from datetime import datetime
from typing import Callable, Optional

from libs.result import Error, Result, Return
from src.app.errors import RATE_LIMITED
from src.app.services.rate_limit_store import IRateLimitStore
from src.domain.base import utcnow

logger = logging.getLogger(__name__)


class RateLimitService:
    """
    Business Rules:
    - A key is locked once it has max_attempts failures and the last one
      happened less than lockout_seconds ago
    - Records expire in the store lockout_seconds after the last failure,
      so an old run of failures never counts towards a new lockout
    - Successful authentication clears the record
    """

    def __init__(
        self,
        store: IRateLimitStore,
        max_attempts: int = 5,
        lockout_seconds: int = 15 * 60,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self._clock = clock or utcnow

    async def check_rate_limit(self, key: str) -> Result[None]:
        """
        Check whether key may attempt to authenticate.

        Returns:
            Ok, or Error(RATE_LIMITED) with details["retry_after"] in seconds
        """
        record = await self.store.get(key)
        if record is None or record.count < self.max_attempts:
            return Return.ok(None)

        elapsed = (self._clock() - record.last_attempt).total_seconds()
        if elapsed < self.lockout_seconds:
            remaining = math.ceil(self.lockout_seconds - elapsed)
            logger.warning(
                "Login locked for %s (%d attempts), %ds remaining",
                key,
                record.count,
                remaining,
            )
            return Return.err(
                Error(
                    RATE_LIMITED,
                    f"Too many login attempts. Please try again in {remaining} seconds.",
                    {"retry_after": remaining},
                )
            )

        # The store expires the record on its own
        logger.info("Lockout expired for %s", key)
        return Return.ok(None)

    async def record_failed_attempt(self, key: str) -> int:
        record = await self.store.increment(key, self.lockout_seconds)
        logger.info("Failed attempts for %s: %d", key, record.count)
        return record.count

    async def clear_rate_limit(self, key: str) -> None:
        await self.store.clear(key)
        logger.debug("Rate limit cleared for %s", key)
