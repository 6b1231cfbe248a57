"""
Google Callback Use Case

Logs the Google identity in, registering it first if no account exists.
"""

import logging
from typing import Optional

from libs.result import Result, Return
from src.app.errors import NO_ACCOUNT
from src.domain.entities import ClientInfo
from .dtos import GoogleCallbackResponse
from .google_login_use_case import GoogleLoginUseCase
from .google_register_use_case import GoogleRegisterUseCase

logger = logging.getLogger(__name__)


class GoogleCallbackUseCase:
    def __init__(self, login: GoogleLoginUseCase, register: GoogleRegisterUseCase):
        self.login = login
        self.register = register

    async def execute(
        self, token: str, client_info: Optional[ClientInfo] = None
    ) -> Result[GoogleCallbackResponse]:
        logged_in = await self.login.execute(token, client_info)
        if logged_in.is_ok():
            return Return.ok(GoogleCallbackResponse(tokens=logged_in.value, registered=False))

        if logged_in.error.code != NO_ACCOUNT:
            return logged_in

        logger.info("No account for Google identity, registering")
        registered = await self.register.execute(token, client_info)
        if registered.is_err():
            return registered
        return Return.ok(GoogleCallbackResponse(tokens=registered.value, registered=True))
