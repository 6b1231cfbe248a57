"""
Session Service

Create/update/find/delete/sweep of session records. Every mutation commits
on its own: the login saga (create -> mint -> patch) is not transactional,
and the expiry sweep may run between any two steps.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Union
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.errors import INVALID_SESSION, SESSION_NOT_FOUND
from src.app.services.session_dtos import SessionCreate, SessionUpdate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Session

logger = logging.getLogger(__name__)

SessionId = Union[UUID, str]

# Only these columns accept NULL; an explicit None elsewhere is ignored
NULLABLE_FIELDS = {"last_used_at"}


def _as_uuid(session_id: SessionId) -> Optional[UUID]:
    if isinstance(session_id, UUID):
        return session_id
    try:
        return UUID(str(session_id))
    except ValueError:
        return None


class SessionService:
    """
    Business Rules:
    - A session is never persisted with expires_at in the past
    - Deletes are idempotent (deleting nothing is not an error)
    - The sweep removes expired sessions and pending sessions (empty
      refresh token) older than the grace period
    """

    def __init__(
        self,
        uow: UnitOfWork,
        pending_grace_seconds: int = 300,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.uow = uow
        self.pending_grace_seconds = pending_grace_seconds
        self._clock = clock or utcnow

    async def create(self, draft: SessionCreate) -> Result[Session]:
        """
        Persist a new session.

        Returns:
            Result with the stored session (id and created_at assigned),
            or Error(INVALID_SESSION) if expires_at is already in the past
        """
        session = Session(
            user_id=draft.user_id,
            refresh_token=draft.refresh_token,
            user_agent=draft.user_agent,
            ip_address=draft.ip_address,
            is_active=draft.is_active,
            expires_at=draft.expires_at,
            created_at=self._clock(),
        )
        if session.is_expired(self._clock()):
            logger.error("Refusing to create expired session for user %s", draft.user_id)
            return Return.err(Error(INVALID_SESSION, "Cannot create expired session"))

        async with self.uow:
            created = await self.uow.sessions.create(session)
            await self.uow.commit()

        logger.info("Session %s created for user %s", created.id, created.user_id)
        return Return.ok(created)

    async def update(self, session_id: SessionId, patch: SessionUpdate) -> Result[Session]:
        """
        Apply a partial update.

        Returns:
            Result with the updated session, Error(SESSION_NOT_FOUND) if the
            row is gone, or Error(INVALID_SESSION) for an expiry in the past
        """
        values = {
            field: value
            for field, value in patch.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_FIELDS
        }
        if values.get("expires_at") is not None and values["expires_at"] <= self._clock():
            return Return.err(Error(INVALID_SESSION, "Cannot move session expiry into the past"))

        uuid = _as_uuid(session_id)
        if uuid is None:
            return Return.err(Error(SESSION_NOT_FOUND, "Session not found"))

        values["updated_at"] = self._clock()
        async with self.uow:
            updated = await self.uow.sessions.update(uuid, values)
            if updated is None:
                logger.warning("Session %s not found for update", session_id)
                return Return.err(Error(SESSION_NOT_FOUND, "Session not found"))
            await self.uow.commit()

        logger.debug("Session %s updated: %s", session_id, sorted(values))
        return Return.ok(updated)

    async def find_by_id(self, session_id: SessionId) -> Optional[Session]:
        uuid = _as_uuid(session_id)
        if uuid is None:
            return None
        async with self.uow:
            return await self.uow.sessions.get_by_id(uuid)

    async def find_by_user_id(self, user_id: str) -> Optional[Session]:
        """First session of a user, if any"""
        sessions = await self.aggregate(user_id)
        return sessions[0] if sessions else None

    async def aggregate(self, user_id: str) -> List[Session]:
        """All sessions of a user"""
        async with self.uow:
            return await self.uow.sessions.get_by_user_id(user_id)

    async def find_by_refresh_token(self, refresh_token: str) -> Optional[Session]:
        if not refresh_token:
            return None
        async with self.uow:
            return await self.uow.sessions.find_by_refresh_token(refresh_token)

    async def find_all(self) -> List[Session]:
        async with self.uow:
            return await self.uow.sessions.get_all()

    async def count(self, user_id: Optional[str] = None) -> int:
        async with self.uow:
            return await self.uow.sessions.count(user_id)

    async def exists(self, refresh_token: str) -> bool:
        if not refresh_token:
            return False
        async with self.uow:
            return await self.uow.sessions.exists_by_refresh_token(refresh_token)

    async def delete_by_token(self, refresh_token: str) -> int:
        if not refresh_token:
            return 0
        async with self.uow:
            deleted = await self.uow.sessions.delete_by_refresh_token(refresh_token)
            await self.uow.commit()
        logger.debug("Deleted %d session(s) by token", deleted)
        return deleted

    async def delete_by_user_id(self, user_id: str) -> int:
        async with self.uow:
            deleted = await self.uow.sessions.delete_by_user_id(user_id)
            await self.uow.commit()
        logger.debug("Deleted %d session(s) for user %s", deleted, user_id)
        return deleted

    async def delete_expired_sessions(self) -> int:
        """
        Remove sessions with expires_at <= now, plus pending sessions whose
        login saga never completed within the grace period.
        """
        now = self._clock()
        pending_before = now - timedelta(seconds=self.pending_grace_seconds)
        async with self.uow:
            deleted = await self.uow.sessions.delete_expired(now, pending_before)
            await self.uow.commit()
        if deleted:
            logger.info("Expired session sweep removed %d session(s)", deleted)
        return deleted
