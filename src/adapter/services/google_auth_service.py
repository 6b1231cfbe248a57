"""
Google ID token verification.

Fetches Google's signing keys (JWKS) over HTTP and verifies the RS256
signature, audience, issuer and expiry with python-jose.
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx
from jose import JWTError, jwt

from src.app.errors import OAuthVerificationError, UpstreamError
from src.app.services.oauth_verifier import IOAuthVerifier
from src.domain.entities import OAuthClaims

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ["accounts.google.com", "https://accounts.google.com"]
KEYS_MAX_AGE_SECONDS = 60 * 60


class GoogleAuthService(IOAuthVerifier):
    def __init__(
        self,
        client_id: str,
        certs_url: str = "https://www.googleapis.com/oauth2/v3/certs",
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.client_id = client_id
        self.certs_url = certs_url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._keys: Optional[Dict[str, Any]] = None
        self._keys_fetched_at = 0.0

    async def aclose(self):
        await self._client.aclose()

    async def verify(self, id_token: str) -> OAuthClaims:
        logger.debug("Verifying Google ID token")
        if not self.client_id:
            raise OAuthVerificationError("Google client id is not configured")
        if not id_token:
            raise OAuthVerificationError("Empty token")

        keys = await self._get_keys()
        try:
            payload = jwt.decode(
                id_token,
                keys,
                algorithms=["RS256"],
                audience=self.client_id,
                issuer=GOOGLE_ISSUERS,
                options={"verify_at_hash": False},
            )
        except JWTError as e:
            logger.warning("Google ID token rejected: %s", e)
            raise OAuthVerificationError(str(e)) from e

        logger.debug("Google ID token verified")
        return OAuthClaims(
            email=payload.get("email"),
            given_name=payload.get("given_name"),
            family_name=payload.get("family_name"),
            picture=payload.get("picture"),
            subject=payload.get("sub"),
            email_verified=payload.get("email_verified"),
        )

    async def _get_keys(self) -> Dict[str, Any]:
        fresh = time.monotonic() - self._keys_fetched_at < KEYS_MAX_AGE_SECONDS
        if self._keys is not None and fresh:
            return self._keys

        try:
            response = await self._client.get(self.certs_url)
            response.raise_for_status()
            keys = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamError("Google certificate fetch timed out", status_code=504) from e
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                "Google certificate fetch failed", status_code=e.response.status_code
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError("Google certificates unavailable") from e

        self._keys = keys
        self._keys_fetched_at = time.monotonic()
        return keys
