"""Client for the legacy username/password auth server."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from launcher_auth.api.base import BaseProviderAPI
from launcher_auth.api.error_codes import LegacyErrorCode
from launcher_auth.api.models import LegacySession, ProviderResponse
from launcher_auth.config import get_settings

logger = logging.getLogger(__name__)

GAME_AGENT = {"name": "Minecraft", "version": 1}

# ForbiddenOperationException messages
MSG_INVALID_CREDENTIALS = "Invalid credentials. Invalid username or password."
MSG_RATELIMIT = "Invalid credentials."
MSG_INVALID_TOKEN = "Invalid token."
MSG_FORBIDDEN = "Forbidden"

# IllegalArgumentException messages
MSG_TOKEN_HAS_PROFILE = "Access token already has a profile assigned."
MSG_INVALID_SALT = "Invalid salt version"


def decipher_error_code(body: dict[str, Any]) -> LegacyErrorCode:
    """Map an auth server error body to a LegacyErrorCode.

    The server reports failures as ``{"error", "errorMessage", "cause"}``.
    Anything not recognized is UNKNOWN.
    """
    error = body.get("error")
    message = body.get("errorMessage")

    if error == "Method Not Allowed":
        return LegacyErrorCode.ERROR_METHOD_NOT_ALLOWED
    if error == "Not Found":
        return LegacyErrorCode.ERROR_NOT_FOUND
    if error == "Unsupported Media Type":
        return LegacyErrorCode.ERROR_UNSUPPORTED_MEDIA_TYPE
    if error == "ForbiddenOperationException":
        if body.get("cause") == "UserMigratedException":
            return LegacyErrorCode.ERROR_USER_MIGRATED
        if message == MSG_INVALID_CREDENTIALS:
            return LegacyErrorCode.ERROR_INVALID_CREDENTIALS
        if message == MSG_RATELIMIT:
            return LegacyErrorCode.ERROR_RATELIMIT
        if message == MSG_INVALID_TOKEN:
            return LegacyErrorCode.ERROR_INVALID_TOKEN
        if message == MSG_FORBIDDEN:
            return LegacyErrorCode.ERROR_CREDENTIALS_MISSING
    if error == "IllegalArgumentException":
        if message == MSG_TOKEN_HAS_PROFILE:
            return LegacyErrorCode.ERROR_ACCESS_TOKEN_HAS_PROFILE
        if message == MSG_INVALID_SALT:
            return LegacyErrorCode.ERROR_INVALID_SALT_VERSION
    if error in ("ResourceException", "GoneException"):
        return LegacyErrorCode.ERROR_GONE
    return LegacyErrorCode.UNKNOWN


class LegacyAuthAPI(BaseProviderAPI):
    """Yggdrasil-style REST client.

    Usage:
        api = LegacyAuthAPI()
        response = await api.authenticate("user@example.com", "secret", None)
        if response.ok:
            session = response.data
    """

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: int | None = None,
    ):
        super().__init__(client=client, timeout=timeout)
        self.base_url = (base_url or get_settings().legacy_auth_url).rstrip("/")

    async def _call(self, endpoint: str, payload: dict[str, Any]) -> httpx.Response:
        return await self._post(
            f"{self.base_url}/{endpoint}",
            json=payload,
            headers={"Content-Type": "application/json"},
        )

    def _failure(self, endpoint: str, response: httpx.Response) -> ProviderResponse:
        body = self._json(response)
        code = decipher_error_code(body)
        logger.error(
            f"Legacy {endpoint} failed ({response.status_code}): "
            f"{body.get('error')} - {body.get('errorMessage')}"
        )
        return ProviderResponse.failure(code, body or response.status_code)

    @staticmethod
    def _transport_failure(endpoint: str, error: Exception) -> ProviderResponse:
        if isinstance(error, httpx.TransportError):
            logger.error(f"Legacy auth server unreachable during {endpoint}: {error}")
            return ProviderResponse.failure(LegacyErrorCode.ERROR_UNREACHABLE, error)
        logger.error(f"Unexpected response during legacy {endpoint}: {error}")
        return ProviderResponse.failure(LegacyErrorCode.UNKNOWN, error)

    async def authenticate(
        self, username: str, password: str, client_token: str | None
    ) -> ProviderResponse[LegacySession]:
        """Authenticate with username and password."""
        payload: dict[str, Any] = {
            "agent": GAME_AGENT,
            "username": username,
            "password": password,
            "requestUser": True,
        }
        if client_token is not None:
            payload["clientToken"] = client_token

        try:
            response = await self._call("authenticate", payload)
            if response.status_code != 200:
                return self._failure("authenticate", response)
            return ProviderResponse.success(LegacySession.model_validate(response.json()))
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            return self._transport_failure("authenticate", e)

    async def validate(
        self, access_token: str, client_token: str | None
    ) -> ProviderResponse[bool]:
        """Check whether an access token is usable.

        204 means valid, 403 means invalid; both are successful calls.
        """
        payload = {"accessToken": access_token, "clientToken": client_token}

        try:
            response = await self._call("validate", payload)
            if response.status_code == 204:
                return ProviderResponse.success(True)
            if response.status_code == 403:
                return ProviderResponse.success(False)
            return self._failure("validate", response)
        except httpx.HTTPError as e:
            return self._transport_failure("validate", e)

    async def refresh(
        self, access_token: str, client_token: str | None
    ) -> ProviderResponse[LegacySession]:
        """Exchange an access token for a fresh one."""
        payload = {
            "accessToken": access_token,
            "clientToken": client_token,
            "requestUser": True,
        }

        try:
            response = await self._call("refresh", payload)
            if response.status_code != 200:
                return self._failure("refresh", response)
            return ProviderResponse.success(LegacySession.model_validate(response.json()))
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            return self._transport_failure("refresh", e)

    async def invalidate(
        self, access_token: str, client_token: str | None
    ) -> ProviderResponse[None]:
        """Invalidate an access token."""
        payload = {"accessToken": access_token, "clientToken": client_token}

        try:
            response = await self._call("invalidate", payload)
            if response.status_code not in (200, 204):
                return self._failure("invalidate", response)
            return ProviderResponse.success(None)
        except httpx.HTTPError as e:
            return self._transport_failure("invalidate", e)
