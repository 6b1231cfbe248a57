"""
Token Generator Service

Builds the access-token claims for a user/session and signs both tokens.
"""

from src.app.services.token_service import (
    DEFAULT_ACCESS_TTL,
    DEFAULT_REFRESH_TTL,
    Duration,
    TokenService,
)
from src.domain.entities import AuthTokens, User


class TokenGeneratorService:
    def __init__(
        self,
        token_service: TokenService,
        access_ttl: Duration = DEFAULT_ACCESS_TTL,
        refresh_ttl: Duration = DEFAULT_REFRESH_TTL,
    ):
        self.token_service = token_service
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def generate_tokens(self, user: User, session_id) -> AuthTokens:
        """
        Generate the token pair for a user bound to a session.

        Args:
            user: Directory user snapshot
            session_id: Live session id, stored as the sid claim

        Returns:
            AuthTokens with expires_in = seconds until refresh-token expiry
        """
        return self.generate_tokens_with_custom_expiration(
            user, session_id, self.access_ttl, self.refresh_ttl
        )

    def generate_tokens_with_custom_expiration(
        self,
        user: User,
        session_id,
        access_ttl: Duration = "15m",
        refresh_ttl: Duration = "7d",
    ) -> AuthTokens:
        payload = {
            "sub": user.id,
            "email": user.email,
            "role": user.role,
            "sid": str(session_id),
        }
        access = self.token_service.sign_access_token(payload, access_ttl)
        refresh = self.token_service.sign_refresh_token(refresh_ttl)

        return AuthTokens(
            access_token=access.token,
            refresh_token=refresh.token,
            expires_in=refresh.expires_in,
        )
