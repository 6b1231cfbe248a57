"""
Register Use Case

Creates a directory account and logs it in.
"""

import logging
from typing import Optional

from libs.result import Result, Return
from src.app.errors import UpstreamError, email_in_use, upstream_error
from src.app.services.user_directory import IUserDirectory
from src.domain.entities import AuthProvider, AuthTokens, ClientInfo
from .dtos import RegisterCommand
from .session_issuer import SessionTokenIssuer

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Business Logic:
    1. Reject if the email already belongs to an account (409)
    2. Create the user in the remote directory
    3. Create a 7-day session, mint tokens, bind the refresh token
    """

    def __init__(self, directory: IUserDirectory, issuer: SessionTokenIssuer):
        self.directory = directory
        self.issuer = issuer

    async def execute(
        self, command: RegisterCommand, client_info: Optional[ClientInfo] = None
    ) -> Result[AuthTokens]:
        logger.info("Registration attempt for %s", command.email)

        try:
            existing = await self.directory.find_by_email(command.email)
            if existing is not None:
                logger.warning("Attempt to register with existing email: %s", command.email)
                return Return.err(email_in_use())

            fields = command.model_dump(by_alias=False, exclude_none=True)
            fields["provider"] = AuthProvider.local.value
            user = await self.directory.create_user(fields)
        except UpstreamError as e:
            logger.error("User directory failed during registration: %s", e)
            return Return.err(upstream_error(e))

        logger.info("User created: %s", user.id)
        result = await self.issuer.issue(user, client_info)
        if result.is_ok():
            logger.info("Registration successful for %s", user.email)
        return result
