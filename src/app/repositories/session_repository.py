from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.domain.entities import Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Persist a new session"""
        pass

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> List[Session]:
        """Get all sessions for a user"""
        pass

    @abstractmethod
    async def find_by_refresh_token(self, refresh_token: str) -> Optional[Session]:
        """Find the session holding this refresh token"""
        pass

    @abstractmethod
    async def get_all(self) -> List[Session]:
        """Get every session"""
        pass

    @abstractmethod
    async def update(self, session_id: UUID, values: Dict[str, Any]) -> Optional[Session]:
        """Apply a partial update. Returns None if the row does not exist."""
        pass

    @abstractmethod
    async def delete_by_refresh_token(self, refresh_token: str) -> int:
        """Delete sessions holding this token. Returns count deleted."""
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: str) -> int:
        """Delete all sessions for a user. Returns count deleted."""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime, pending_before: datetime) -> int:
        """
        Delete sessions with expires_at <= now, and pending sessions
        (empty refresh token) created at or before pending_before.
        """
        pass

    @abstractmethod
    async def count(self, user_id: Optional[str] = None) -> int:
        """Count sessions, optionally for one user"""
        pass

    @abstractmethod
    async def exists_by_refresh_token(self, refresh_token: str) -> bool:
        """Check whether any session holds this token"""
        pass
