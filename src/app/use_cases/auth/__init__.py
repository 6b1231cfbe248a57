"""
Authentication Use Cases

All authentication-related business logic.
"""

from .login_use_case import LoginUseCase
from .register_use_case import RegisterUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .google_login_use_case import GoogleLoginUseCase
from .google_register_use_case import GoogleRegisterUseCase
from .google_signup_use_case import GoogleSignupUseCase
from .google_callback_use_case import GoogleCallbackUseCase
from .session_issuer import SessionTokenIssuer
from .dtos import (
    LoginCommand,
    RegisterCommand,
    GoogleSignupCommand,
    GoogleCallbackResponse,
)

__all__ = [
    # Use Cases
    "LoginUseCase",
    "RegisterUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "GoogleLoginUseCase",
    "GoogleRegisterUseCase",
    "GoogleSignupUseCase",
    "GoogleCallbackUseCase",
    "SessionTokenIssuer",
    # DTOs - Commands
    "LoginCommand",
    "RegisterCommand",
    "GoogleSignupCommand",
    # DTOs - Responses
    "GoogleCallbackResponse",
]
