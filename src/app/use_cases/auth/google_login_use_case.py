"""
Google Login Use Case
"""

import logging
from typing import Optional

from libs.result import Error, Result, Return
from src.app.errors import ACCOUNT_INACTIVE, NO_ACCOUNT, UpstreamError, upstream_error
from src.app.services.oauth_verifier import IOAuthVerifier
from src.app.services.user_cache_service import UserCacheService
from src.app.services.user_directory import IUserDirectory
from src.domain.entities import AuthTokens, ClientInfo
from .google_identity import resolve_user_by_email, verify_google_token
from .session_issuer import SessionTokenIssuer

logger = logging.getLogger(__name__)


class GoogleLoginUseCase:
    """
    Logs in an existing account with a Google ID token.

    Business Rules:
    - Token must verify and carry an email
    - Account must already exist (NO_ACCOUNT otherwise) and be active
    - Same session handling as credential login, minus the password check
    """

    def __init__(
        self,
        verifier: IOAuthVerifier,
        directory: IUserDirectory,
        user_cache: UserCacheService,
        issuer: SessionTokenIssuer,
    ):
        self.verifier = verifier
        self.directory = directory
        self.user_cache = user_cache
        self.issuer = issuer

    async def execute(
        self, token: str, client_info: Optional[ClientInfo] = None
    ) -> Result[AuthTokens]:
        logger.info("Google login attempt")

        try:
            verified = await verify_google_token(self.verifier, token)
            if verified.is_err():
                return verified
            email = verified.value.email

            user = await resolve_user_by_email(self.user_cache, self.directory, email)
        except UpstreamError as e:
            logger.error("Upstream failure during Google login: %s", e)
            return Return.err(upstream_error(e))

        if user is None:
            logger.warning("No account found for Google email %s", email)
            return Return.err(
                Error(NO_ACCOUNT, "No account found with this email. Please register first.")
            )

        if not user.is_active:
            logger.warning("Inactive user %s", email)
            return Return.err(Error(ACCOUNT_INACTIVE, "Your account is not active."))

        result = await self.issuer.start_fresh(user, client_info)
        if result.is_ok():
            logger.info("Google login successful for %s", email)
        return result
