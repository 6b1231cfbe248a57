"""
Google Register Use Case
"""

import logging
from typing import Optional

from libs.result import Result, Return
from src.app.errors import UpstreamError, email_in_use, upstream_error
from src.app.services.oauth_verifier import IOAuthVerifier
from src.app.services.user_cache_service import UserCacheService
from src.app.services.user_directory import IUserDirectory
from src.domain.entities import AuthTokens, ClientInfo
from .google_identity import (
    generate_password,
    google_user_fields,
    resolve_user_by_email,
    verify_google_token,
)
from .session_issuer import SessionTokenIssuer

logger = logging.getLogger(__name__)


class GoogleRegisterUseCase:
    """
    Creates an account from a Google ID token and logs it in.

    The account gets a random password (the user signs in through Google).
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
        logger.info("Google register attempt")

        try:
            verified = await verify_google_token(self.verifier, token)
            if verified.is_err():
                return verified
            claims = verified.value

            existing = await resolve_user_by_email(self.user_cache, self.directory, claims.email)
            if existing is not None:
                logger.warning("User already exists for Google email %s", claims.email)
                return Return.err(email_in_use())

            user = await self.directory.create_user(
                google_user_fields(claims, generate_password())
            )
        except UpstreamError as e:
            logger.error("Upstream failure during Google register: %s", e)
            return Return.err(upstream_error(e))

        logger.info("User created from Google identity: %s", user.id)
        result = await self.issuer.issue(user, client_info)
        if result.is_ok():
            logger.info("Google register successful for %s", user.email)
        return result
