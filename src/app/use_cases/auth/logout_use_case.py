"""
Logout Use Case
"""

import logging

from libs.result import Error, Result, Return
from src.app.errors import SESSION_NOT_FOUND
from src.app.services.session_service import SessionService
from src.app.services.user_cache_service import UserCacheService

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """Deletes the session holding the refresh token and drops the user's cache entry"""

    def __init__(self, sessions: SessionService, user_cache: UserCacheService):
        self.sessions = sessions
        self.user_cache = user_cache

    async def execute(self, refresh_token: str) -> Result[None]:
        logger.info("Logout attempt")

        session = await self.sessions.find_by_refresh_token(refresh_token)
        if session is None:
            logger.warning("Session not found for logout")
            return Return.err(Error(SESSION_NOT_FOUND, "Session not found"))

        await self.sessions.delete_by_token(refresh_token)
        await self.user_cache.invalidate(session.user_id)

        logger.info("Logout successful for user %s", session.user_id)
        return Return.ok(None)
