"""Legacy username/password authentication flow."""

import logging
from typing import Awaitable, Callable, TypeVar

from launcher_auth.api.error_codes import LegacyErrorCode
from launcher_auth.api.models import LegacySession, ProviderResponse
from launcher_auth.api.protocols import LegacyProviderClient
from launcher_auth.auth.errors import legacy_auth_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LegacyAuthFlow:
    """Single-request operations against the legacy auth server.

    Every operation raises AuthError with a classified error on failure.
    """

    def __init__(self, client: LegacyProviderClient):
        self._client = client

    async def _call(
        self,
        operation: str,
        method: Callable[..., Awaitable[ProviderResponse[T]]],
        *args,
    ) -> T:
        try:
            response = await method(*args)
        except Exception as e:
            logger.error(f"Unexpected error during legacy {operation}: {e}", exc_info=True)
            raise legacy_auth_error(LegacyErrorCode.UNKNOWN) from e

        if not response.ok:
            raise legacy_auth_error(response.error_code)
        return response.data

    async def authenticate(
        self, username: str, password: str, client_token: str | None
    ) -> LegacySession:
        """Log in with username and password.

        Raises:
            AuthError: ERROR_NOT_PAID when the account owns no game profile,
                or the classified provider error
        """
        session = await self._call(
            "authenticate", self._client.authenticate, username, password, client_token
        )
        if session.selected_profile is None:
            logger.warning("Legacy login succeeded but the account has no game profile")
            raise legacy_auth_error(LegacyErrorCode.ERROR_NOT_PAID)
        return session

    async def invalidate(self, access_token: str, client_token: str | None) -> None:
        await self._call("invalidate", self._client.invalidate, access_token, client_token)

    async def validate(self, access_token: str, client_token: str | None) -> bool:
        return bool(
            await self._call("validate", self._client.validate, access_token, client_token)
        )

    async def refresh(self, access_token: str, client_token: str | None) -> LegacySession:
        return await self._call("refresh", self._client.refresh, access_token, client_token)

