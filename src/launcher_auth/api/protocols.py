"""Interfaces the authentication flows consume.

Implementations must report every failure as an ERROR ``ProviderResponse``;
no transport exception is allowed to escape these methods.
"""

from typing import Protocol

from launcher_auth.api.models import (
    GameProfile,
    GameToken,
    LegacySession,
    MicrosoftToken,
    ProviderResponse,
    XboxToken,
)


class LegacyProviderClient(Protocol):
    """Calls of the legacy username/password auth server."""

    async def authenticate(
        self, username: str, password: str, client_token: str | None
    ) -> ProviderResponse[LegacySession]: ...

    async def validate(
        self, access_token: str, client_token: str | None
    ) -> ProviderResponse[bool]: ...

    async def refresh(
        self, access_token: str, client_token: str | None
    ) -> ProviderResponse[LegacySession]: ...

    async def invalidate(
        self, access_token: str, client_token: str | None
    ) -> ProviderResponse[None]: ...


class FederatedProviderClient(Protocol):
    """One call per stage of the Microsoft to game-token exchange chain."""

    async def get_access_token(
        self, code: str, refresh: bool
    ) -> ProviderResponse[MicrosoftToken]: ...

    async def get_xbl_token(self, ms_access_token: str) -> ProviderResponse[XboxToken]: ...

    async def get_xsts_token(self, xbl_token: XboxToken) -> ProviderResponse[XboxToken]: ...

    async def get_game_token(self, xsts_token: XboxToken) -> ProviderResponse[GameToken]: ...

    async def get_game_profile(self, game_access_token: str) -> ProviderResponse[GameProfile]: ...
