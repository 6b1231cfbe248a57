from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, func, or_
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import ISessionRepository
from src.domain.entities import Session


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        stmt = (
            select(Session)
            .where(Session.id == session_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_user_id(self, user_id: str) -> List[Session]:
        """Get all sessions for a user, oldest first"""
        stmt = (
            select(Session)
            .where(Session.user_id == user_id)
            .order_by(Session.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_refresh_token(self, refresh_token: str) -> Optional[Session]:
        """
        Find session by refresh token.

        We don't filter by active/expired here - that's checked in the use case
        so we can log the precise reason.
        """
        stmt = select(Session).where(Session.refresh_token == refresh_token).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_all(self) -> List[Session]:
        result = await self.session.execute(select(Session))
        return list(result.scalars().all())

    async def update(self, session_id: UUID, values: Dict[str, Any]) -> Optional[Session]:
        """Partial update; None when the row no longer exists"""
        stmt = update(Session).where(Session.id == session_id).values(**values)
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        await self.session.flush()
        return await self.get_by_id(session_id)

    async def delete_by_refresh_token(self, refresh_token: str) -> int:
        stmt = (
            delete(Session)
            .where(Session.refresh_token == refresh_token)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_by_user_id(self, user_id: str) -> int:
        stmt = (
            delete(Session)
            .where(Session.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_expired(self, now: datetime, pending_before: datetime) -> int:
        stmt = (
            delete(Session)
            .where(
                or_(
                    Session.expires_at <= now,
                    and_(
                        Session.refresh_token == "",
                        Session.created_at <= pending_before,
                    ),
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def count(self, user_id: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(Session)
        if user_id is not None:
            stmt = stmt.where(Session.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def exists_by_refresh_token(self, refresh_token: str) -> bool:
        return await self.find_by_refresh_token(refresh_token) is not None
