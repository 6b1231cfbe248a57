"""
Token value objects
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AuthTokens(BaseModel):
    """Access/refresh token pair. expires_in is seconds until refresh-token expiry."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    access_token: str
    refresh_token: str
    expires_in: int


class JwtPayload(BaseModel):
    """Access-token claims"""

    model_config = ConfigDict(extra="ignore")

    sub: str
    email: str
    role: Optional[str] = None
    sid: str
    iat: Optional[int] = None
    exp: Optional[int] = None


class SignedToken(BaseModel):
    """A signed token together with its lifetime in seconds"""

    token: str
    expires_in: int
