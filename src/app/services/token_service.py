"""
Token Service

Signs and verifies access tokens (JWT, HS256 by default) and mints opaque
refresh tokens.
"""

import hashlib
import logging
import re
import secrets
from datetime import UTC, datetime
from typing import Any, Dict, Optional, Union

from jose import JWTError, jwt

from src.domain.entities import JwtPayload, SignedToken

logger = logging.getLogger(__name__)

DEFAULT_ACCESS_TTL = 15 * 60
DEFAULT_REFRESH_TTL = 7 * 24 * 60 * 60

_DURATION_UNITS = {"s": 1, "m": 60, "h": 60 * 60, "d": 24 * 60 * 60}
_DURATION_RE = re.compile(r"^(\d+)([smhd])$")
REFRESH_TOKEN_RE = re.compile(r"^[0-9a-f]{64}$")

Duration = Union[int, str]


def parse_duration(value: Duration, default: int = DEFAULT_REFRESH_TTL) -> int:
    """
    Convert a duration to seconds.

    Accepts an int (seconds) or a string like "30s", "15m", "1h", "7d".
    Anything else falls back to ``default``.
    """
    if isinstance(value, int):
        return value
    match = _DURATION_RE.match(value.strip())
    if not match:
        return default
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[unit]


class TokenService:
    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("JWT secret is not set")
        self.secret = secret
        self.algorithm = algorithm

    def sign_access_token(
        self, payload: Dict[str, Any], ttl: Duration = DEFAULT_ACCESS_TTL
    ) -> SignedToken:
        """
        Sign an access token.

        The payload claims are copied verbatim; iat/exp are added.
        """
        seconds = parse_duration(ttl, DEFAULT_ACCESS_TTL)
        now = int(datetime.now(UTC).timestamp())
        claims = {**payload, "iat": now, "exp": now + seconds}
        token = jwt.encode(claims, self.secret, algorithm=self.algorithm)
        return SignedToken(token=token, expires_in=seconds)

    def sign_refresh_token(self, ttl: Duration = DEFAULT_REFRESH_TTL) -> SignedToken:
        """
        Mint an opaque refresh token: hex SHA-256 of 32 random bytes.

        Not self-verifying - only a session-store lookup establishes validity.
        """
        token = hashlib.sha256(secrets.token_bytes(32)).hexdigest()
        return SignedToken(token=token, expires_in=parse_duration(ttl))

    def verify_token(self, token: str) -> Optional[JwtPayload]:
        """Verify signature and expiry. Returns None if the token is invalid."""
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return JwtPayload.model_validate(claims)
        except (JWTError, ValueError) as e:
            logger.debug("Access token rejected: %s", e)
            return None

    def decode_token(self, token: str) -> Optional[JwtPayload]:
        """Parse claims without verifying the signature"""
        try:
            return JwtPayload.model_validate(jwt.get_unverified_claims(token))
        except (JWTError, ValueError):
            return None

    @staticmethod
    def is_refresh_token_well_formed(token: str) -> bool:
        return bool(token) and REFRESH_TOKEN_RE.match(token) is not None
