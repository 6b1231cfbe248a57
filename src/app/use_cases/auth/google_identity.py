"""
Helpers shared by the Google use cases.
"""

import logging
import secrets
import string
from typing import Optional

from libs.result import Error, Result, Return
from src.app.errors import INVALID_TOKEN, OAuthVerificationError
from src.app.services.oauth_verifier import IOAuthVerifier
from src.app.services.user_cache_service import UserCacheService
from src.app.services.user_directory import IUserDirectory
from src.domain.entities import AuthProvider, OAuthClaims, User

logger = logging.getLogger(__name__)

_PASSWORD_SPECIALS = "@$!%*?&"
_PASSWORD_ALPHABET = string.ascii_letters + string.digits + _PASSWORD_SPECIALS


async def verify_google_token(verifier: IOAuthVerifier, token: str) -> Result[OAuthClaims]:
    """Verify the ID token and require an email claim. UpstreamError propagates."""
    try:
        claims = await verifier.verify(token)
    except OAuthVerificationError as e:
        logger.warning("Google token rejected: %s", e)
        return Return.err(Error(INVALID_TOKEN, "Invalid Google token"))

    if not claims.email:
        logger.error("Invalid Google token - no email found")
        return Return.err(Error(INVALID_TOKEN, "Invalid Google token"))
    return Return.ok(claims)


async def resolve_user_by_email(
    user_cache: UserCacheService, directory: IUserDirectory, email: str
) -> Optional[User]:
    """Cache first, directory on miss"""
    cached = await user_cache.get_by_email(email)
    if cached is not None:
        return cached.to_user()
    return await directory.find_by_email(email)


def generate_password(length: int = 16) -> str:
    """
    Random password for accounts created through Google. Always contains an
    upper, a lower, a digit and a special character.
    """
    rng = secrets.SystemRandom()
    chars = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
        secrets.choice(_PASSWORD_SPECIALS),
    ]
    chars += [secrets.choice(_PASSWORD_ALPHABET) for _ in range(length - len(chars))]
    rng.shuffle(chars)
    return "".join(chars)


def google_user_fields(claims: OAuthClaims, password: str) -> dict:
    fields = {
        "email": claims.email,
        "first_name": claims.given_name or "",
        "last_name": claims.family_name or "",
        "provider": AuthProvider.google.value,
        "password": password,
    }
    if claims.picture:
        fields["avatar"] = claims.picture
    return fields
