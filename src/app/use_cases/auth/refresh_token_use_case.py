"""
Refresh Token Use Case

Exchanges a refresh token for a new token pair bound to the same session.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from libs.result import Error, Result, Return
from src.app.errors import INVALID_SESSION, UpstreamError, upstream_error
from src.app.services.session_dtos import SessionUpdate
from src.app.services.session_service import SessionService
from src.app.services.token_generator import TokenGeneratorService
from src.app.services.token_service import TokenService
from src.app.services.user_cache_service import UserCacheService
from src.app.services.user_directory import IUserDirectory
from src.domain.base import utcnow
from src.domain.entities import AuthTokens

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing tokens.

    Business Rules:
    - Refresh token rotation: the session row and the cache both take the
      new token, so the presented one stops working immediately
    - Session must exist, be active and not be expired
    - User must still be active (cache first, directory on miss)
    - The new access token keeps the same sid
    """

    def __init__(
        self,
        sessions: SessionService,
        directory: IUserDirectory,
        user_cache: UserCacheService,
        token_generator: TokenGeneratorService,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.sessions = sessions
        self.directory = directory
        self.user_cache = user_cache
        self.token_generator = token_generator
        self._clock = clock or utcnow

    async def execute(self, refresh_token: str) -> Result[AuthTokens]:
        logger.info("Refresh token attempt")

        if not TokenService.is_refresh_token_well_formed(refresh_token):
            logger.warning("Malformed refresh token")
            return Return.err(Error(INVALID_SESSION, "Invalid or expired session."))

        now = self._clock()
        session = await self.sessions.find_by_refresh_token(refresh_token)
        if session is None or not session.is_active or session.is_expired(now):
            logger.warning("Invalid or expired session for refresh token")
            return Return.err(Error(INVALID_SESSION, "Invalid or expired session."))

        cached = await self.user_cache.get_by_id(session.user_id)
        if cached is not None:
            user = cached.to_user()
        else:
            try:
                user = await self.directory.find_by_id(session.user_id)
            except UpstreamError as e:
                logger.error("User directory failed during refresh: %s", e)
                return Return.err(upstream_error(e))

        if user is None or not user.is_active:
            logger.warning("Inactive user account for session %s", session.id)
            return Return.err(Error(INVALID_SESSION, "Inactive user account"))

        tokens = self.token_generator.generate_tokens(user, session.id)

        patched = await self.sessions.update(
            session.id,
            SessionUpdate(last_used_at=now, refresh_token=tokens.refresh_token),
        )
        if patched.is_err():
            logger.warning("Session %s removed during refresh", session.id)
            return Return.err(Error(INVALID_SESSION, "Invalid or expired session."))

        await self.user_cache.set(user.id, user, tokens.refresh_token)

        logger.info("Token refreshed for %s", user.email)
        return Return.ok(tokens)
