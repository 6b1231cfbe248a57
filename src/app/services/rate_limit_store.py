from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import RateLimitRecord


class IRateLimitStore(ABC):
    """
    Storage for failed-attempt counters.

    increment() must be atomic: concurrent failures for the same key each
    count exactly once.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[RateLimitRecord]:
        pass

    @abstractmethod
    async def increment(self, key: str, window_seconds: int) -> RateLimitRecord:
        """Add one failed attempt, refresh last_attempt, create the record if absent"""
        pass

    @abstractmethod
    async def clear(self, key: str) -> None:
        pass
