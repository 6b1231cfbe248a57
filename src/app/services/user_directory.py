from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from src.domain.entities import User


class IUserDirectory(ABC):
    """
    Remote user directory - the source of truth for accounts.

    Implementations raise UpstreamError on transport failures, timeouts and
    unexpected responses. A missing user is None, not an error.
    """

    @abstractmethod
    async def create_user(self, fields: Dict[str, Any]) -> User:
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def validate_credentials(self, email: str, password: str) -> bool:
        pass
