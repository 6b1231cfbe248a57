"""
HTTP client for the remote user directory service.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from src.app.errors import UpstreamError
from src.app.services.user_directory import IUserDirectory
from src.domain.entities import User

logger = logging.getLogger(__name__)


class UserDirectoryClient(IUserDirectory):
    """
    Talks to the users service over HTTP.

    Every call is bounded by the client timeout; timeouts, transport errors
    and unexpected statuses become UpstreamError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=timeout
        )

    async def aclose(self):
        await self._client.aclose()

    async def create_user(self, fields: Dict[str, Any]) -> User:
        logger.info("Creating user %s", fields.get("email"))
        body = {to_camel(key): value for key, value in fields.items()}
        response = await self._request("POST", "/users", json=body)
        self._raise_for_status(response)
        return self._parse_user(response)

    async def find_by_email(self, email: str) -> Optional[User]:
        response = await self._request("GET", f"/users/email/{quote(email, safe='')}")
        if response.status_code == 404 or not response.content:
            return None
        self._raise_for_status(response)
        return self._parse_user(response)

    async def find_by_id(self, user_id: str) -> Optional[User]:
        response = await self._request("GET", f"/users/{quote(user_id, safe='')}")
        if response.status_code == 404 or not response.content:
            return None
        self._raise_for_status(response)
        return self._parse_user(response)

    async def validate_credentials(self, email: str, password: str) -> bool:
        response = await self._request(
            "POST",
            "/users/validate-credentials",
            json={"email": email, "password": password},
        )
        if response.status_code in (400, 401, 403, 404):
            return False
        self._raise_for_status(response)

        if not response.content:
            return True
        try:
            body = response.json()
        except ValueError:
            # Plain-text success message
            return True
        if isinstance(body, bool):
            return body
        if isinstance(body, dict) and "valid" in body:
            return bool(body["valid"])
        return True

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("User directory timeout on %s %s", method, url)
            raise UpstreamError("User directory timed out", status_code=504) from e
        except httpx.HTTPError as e:
            logger.error("User directory unreachable on %s %s: %s", method, url, e)
            raise UpstreamError("User directory unavailable") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response):
        if response.is_success:
            return
        message = "User directory request failed"
        try:
            body = response.json()
            if isinstance(body, dict) and body.get("message"):
                message = str(body["message"])
        except ValueError:
            pass
        raise UpstreamError(message, status_code=response.status_code)

    @staticmethod
    def _parse_user(response: httpx.Response) -> User:
        try:
            body = response.json()
            if isinstance(body, dict) and "id" not in body and isinstance(body.get("data"), dict):
                body = body["data"]
            return User.model_validate(body)
        except (ValueError, ValidationError) as e:
            raise UpstreamError("User directory returned an invalid user") from e
