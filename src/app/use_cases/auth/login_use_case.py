"""
Login Use Case

Handles credential authentication and issues a fresh session with tokens.
"""

import logging
from typing import Optional

from libs.result import Error, Result, Return
from src.app.errors import ACCOUNT_INACTIVE, UpstreamError, invalid_credentials, upstream_error
from src.app.services.rate_limit_service import RateLimitService
from src.app.services.user_directory import IUserDirectory
from src.domain.entities import AuthTokens, ClientInfo
from .dtos import LoginCommand
from .session_issuer import SessionTokenIssuer

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for credential login.

    Business Rules:
    - Locked accounts are rejected before the directory is contacted
    - Unknown email and wrong password produce the same error and the same
      bookkeeping (one failed attempt recorded, nothing cleared)
    - The failed-attempt counter is cleared only after the password checks out
    - Inactive accounts cannot log in
    - Previous sessions of the user are dropped; one new 7-day session is created
    """

    def __init__(
        self,
        directory: IUserDirectory,
        rate_limiter: RateLimitService,
        issuer: SessionTokenIssuer,
    ):
        self.directory = directory
        self.rate_limiter = rate_limiter
        self.issuer = issuer

    async def execute(
        self, command: LoginCommand, client_info: Optional[ClientInfo] = None
    ) -> Result[AuthTokens]:
        """
        Execute login use case.

        Args:
            command: Email and plain text password
            client_info: User agent / IP address stored on the session

        Returns:
            Result with AuthTokens, or Error
        """
        key = command.email.strip().lower()
        logger.info("Login attempt for %s", key)

        try:
            limit = await self.rate_limiter.check_rate_limit(key)
            if limit.is_err():
                return limit

            user = await self.directory.find_by_email(command.email)
            valid = user is not None and await self.directory.validate_credentials(
                command.email, command.password
            )

            if not valid:
                await self.rate_limiter.record_failed_attempt(key)
                logger.warning("Invalid credentials for %s", key)
                return Return.err(invalid_credentials())

            await self.rate_limiter.clear_rate_limit(key)
        except UpstreamError as e:
            logger.error("Upstream failure during login for %s: %s", key, e)
            return Return.err(upstream_error(e))

        if not user.is_active:
            logger.warning("Inactive user %s", key)
            return Return.err(
                Error(ACCOUNT_INACTIVE, "Your account is not active. Please verify your email.")
            )

        result = await self.issuer.start_fresh(user, client_info)
        if result.is_ok():
            logger.info("Login successful for %s", key)
        return result
