"""
Google Signup Use Case

Signup where the password is chosen by the user. Without a password the
caller is told to complete the profile first; no account is created.
"""

import logging
from typing import Optional

from libs.result import Result, Return
from src.app.errors import UpstreamError, email_in_use, upstream_error
from src.app.services.oauth_verifier import IOAuthVerifier
from src.app.services.user_cache_service import UserCacheService
from src.app.services.user_directory import IUserDirectory
from src.domain.entities import (
    ClientInfo,
    NeedsProfileCompletion,
    SignupOutcome,
    TokensIssued,
)
from .dtos import GoogleSignupCommand
from .google_identity import google_user_fields, resolve_user_by_email, verify_google_token
from .session_issuer import SessionTokenIssuer

logger = logging.getLogger(__name__)


class GoogleSignupUseCase:
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
        self, command: GoogleSignupCommand, client_info: Optional[ClientInfo] = None
    ) -> Result[SignupOutcome]:
        """
        Returns:
            Result with TokensIssued or NeedsProfileCompletion, or Error
            (INVALID_TOKEN, EMAIL_ALREADY_EXISTS, UPSTREAM_ERROR)
        """
        logger.info("Google signup attempt")

        try:
            verified = await verify_google_token(self.verifier, command.token)
            if verified.is_err():
                return verified
            claims = verified.value

            existing = await resolve_user_by_email(self.user_cache, self.directory, claims.email)
            if existing is not None:
                logger.warning("User already exists for Google email %s", claims.email)
                return Return.err(email_in_use())

            if not command.password:
                logger.info("No password provided for %s, profile completion required", claims.email)
                return Return.ok(NeedsProfileCompletion(email=claims.email))

            user = await self.directory.create_user(
                google_user_fields(claims, command.password)
            )
        except UpstreamError as e:
            logger.error("Upstream failure during Google signup: %s", e)
            return Return.err(upstream_error(e))

        logger.info("User created from Google signup: %s", user.id)
        issued = await self.issuer.issue(user, client_info)
        if issued.is_err():
            return issued
        return Return.ok(TokensIssued(tokens=issued.value))
