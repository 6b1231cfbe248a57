from abc import ABC, abstractmethod
from typing import Any, Optional


class ICache(ABC):
    """TTL-aware key-value cache. Values are JSON-compatible."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store value for ttl seconds, overwriting any prior entry"""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        pass
