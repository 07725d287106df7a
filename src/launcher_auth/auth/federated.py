"""Microsoft to game-token exchange chain.

The chain has five sequential stages:

    0. Microsoft token  (authorization code or refresh token)
    1. Xbox Live (XBL) token
    2. XSTS token
    3. game access token
    4. game profile

Stage 0 is skipped in MC_REFRESH mode, where the entry value already is a
Microsoft access token. The first failing stage ends the chain with its
classified error.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from launcher_auth.api.error_codes import FederatedErrorCode
from launcher_auth.api.models import (
    GameProfile,
    GameToken,
    MicrosoftToken,
    ProviderResponse,
    XboxToken,
)
from launcher_auth.api.protocols import FederatedProviderClient
from launcher_auth.auth.errors import AuthError, federated_auth_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AuthMode(Enum):
    """What the entry value of the chain is.

    FULL: authorization code of a new login.
    MS_REFRESH: Microsoft refresh token; every token is renewed.
    MC_REFRESH: Microsoft access token; only the game token is renewed.
    """

    FULL = 0
    MS_REFRESH = 1
    MC_REFRESH = 2


@dataclass
class FederatedAuthResult:
    """Everything produced by a completed chain.

    ``ms_token`` is None in MC_REFRESH mode.
    """

    ms_token: MicrosoftToken | None
    ms_access_token: str
    xbl: XboxToken
    xsts: XboxToken
    game_token: GameToken
    profile: GameProfile


def _unwrap(response: ProviderResponse[T], stage: str) -> T:
    """Return the payload of a successful stage or raise its classified error."""
    if not response.ok:
        logger.warning(f"Federated login stopped at {stage}: {response.error_code}")
        raise federated_auth_error(response.error_code)
    return response.data


class FederatedAuthFlow:
    """Runs the exchange chain against a federated provider client."""

    def __init__(self, client: FederatedProviderClient):
        self._client = client

    async def exchange_chain(self, entry_value: str, mode: AuthMode) -> FederatedAuthResult:
        """Run the chain in the given mode.

        Args:
            entry_value: Authorization code (FULL), refresh token (MS_REFRESH)
                or Microsoft access token (MC_REFRESH)
            mode: The auth mode

        Raises:
            AuthError: On the first failing stage, or UNKNOWN for any
                unexpected exception
        """
        try:
            ms_token = None
            if mode is AuthMode.MC_REFRESH:
                ms_access_token = entry_value
            else:
                ms_token = _unwrap(
                    await self._client.get_access_token(
                        entry_value, refresh=mode is AuthMode.MS_REFRESH
                    ),
                    "token request",
                )
                ms_access_token = ms_token.access_token

            xbl = _unwrap(await self._client.get_xbl_token(ms_access_token), "XBL")
            xsts = _unwrap(await self._client.get_xsts_token(xbl), "XSTS")
            game_token = _unwrap(await self._client.get_game_token(xsts), "game login")
            profile = _unwrap(
                await self._client.get_game_profile(game_token.access_token), "profile"
            )
        except AuthError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error during federated login ({mode.name}): {e}", exc_info=True)
            raise federated_auth_error(FederatedErrorCode.UNKNOWN) from e

        return FederatedAuthResult(
            ms_token=ms_token,
            ms_access_token=ms_access_token,
            xbl=xbl,
            xsts=xsts,
            game_token=game_token,
            profile=profile,
        )
