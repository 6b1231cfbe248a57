"""
Use Cases

Organized by domain folder:
- auth/: Authentication flows
"""

from .auth import (
    LoginUseCase,
    RegisterUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    GoogleLoginUseCase,
    GoogleRegisterUseCase,
    GoogleSignupUseCase,
    GoogleCallbackUseCase,
)

__all__ = [
    "LoginUseCase",
    "RegisterUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "GoogleLoginUseCase",
    "GoogleRegisterUseCase",
    "GoogleSignupUseCase",
    "GoogleCallbackUseCase",
]
