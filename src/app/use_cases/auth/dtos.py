"""
Authentication Use Case DTOs (Data Transfer Objects)

Command objects handed to the auth use cases by the API layer.
"""

from typing import Optional

from pydantic import BaseModel

from src.domain.entities import AuthTokens


# ============================================================================
# Command DTOs
# ============================================================================


class LoginCommand(BaseModel):
    """Credential login intent"""

    email: str
    password: str


class RegisterCommand(BaseModel):
    """Local account registration intent"""

    email: str
    password: str
    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = None
    avatar: Optional[str] = None


class GoogleSignupCommand(BaseModel):
    """Google signup intent. password is optional until the profile is complete."""

    token: str
    password: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class GoogleCallbackResponse(BaseModel):
    """Result of the Google callback: tokens plus whether an account was created"""

    tokens: AuthTokens
    registered: bool
