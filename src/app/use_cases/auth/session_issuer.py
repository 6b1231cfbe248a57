"""
Session issuance shared by every login/registration flow.

create session -> mint tokens -> patch session -> patch cache. The sequence
is not transactional; a crash after the create leaves a pending session
(empty refresh token) that the expiry sweep reclaims after its grace period.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from libs.result import Result, Return
from src.app.services.session_dtos import SessionCreate, SessionUpdate
from src.app.services.session_service import SessionService
from src.app.services.token_generator import TokenGeneratorService
from src.app.services.user_cache_service import UserCacheService
from src.domain.base import utcnow
from src.domain.entities import AuthTokens, ClientInfo, User, merge_cached_user

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = 7 * 24 * 60 * 60


class SessionTokenIssuer:
    def __init__(
        self,
        sessions: SessionService,
        token_generator: TokenGeneratorService,
        user_cache: UserCacheService,
        session_ttl_seconds: int = DEFAULT_SESSION_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.sessions = sessions
        self.token_generator = token_generator
        self.user_cache = user_cache
        self.session_ttl_seconds = session_ttl_seconds
        self._clock = clock or utcnow

    async def start_fresh(
        self, user: User, client_info: Optional[ClientInfo] = None
    ) -> Result[AuthTokens]:
        """
        Drop the user's previous sessions, refresh the cached snapshot and
        issue a new session with tokens.
        """
        await self.sessions.delete_by_user_id(user.id)

        cached = await self.user_cache.get_by_id(user.id)
        if cached is not None:
            user = merge_cached_user(user, cached)
        else:
            await self.user_cache.set(user.id, user)

        return await self.issue(user, client_info)

    async def issue(
        self, user: User, client_info: Optional[ClientInfo] = None
    ) -> Result[AuthTokens]:
        client_info = client_info or ClientInfo()

        created = await self.sessions.create(
            SessionCreate(
                user_id=user.id,
                refresh_token="",
                user_agent=client_info.user_agent,
                ip_address=client_info.ip_address,
                is_active=True,
                expires_at=self._clock() + timedelta(seconds=self.session_ttl_seconds),
            )
        )
        if created.is_err():
            return created
        session = created.value

        tokens = self.token_generator.generate_tokens(user, session.id)

        patched = await self.sessions.update(
            session.id, SessionUpdate(refresh_token=tokens.refresh_token)
        )
        if patched.is_err():
            logger.error("Session %s vanished before tokens were bound", session.id)
            return patched

        await self.user_cache.set(user.id, user, tokens.refresh_token)
        return Return.ok(tokens)
