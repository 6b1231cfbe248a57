from abc import ABC, abstractmethod

from src.domain.entities import OAuthClaims


class IOAuthVerifier(ABC):
    """Verifies a third-party identity token"""

    @abstractmethod
    async def verify(self, id_token: str) -> OAuthClaims:
        """
        Returns the token claims.

        Raises OAuthVerificationError if the token is rejected and
        UpstreamError if the provider cannot be reached.
        """
        pass
