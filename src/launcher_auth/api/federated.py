"""Client for the Microsoft / Xbox Live / game services exchange chain."""

import logging
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from launcher_auth.api.base import BaseProviderAPI
from launcher_auth.api.error_codes import (
    XERR_NO_XBOX_ACCOUNT,
    XERR_UNDER_18,
    XERR_XBL_BANNED,
    FederatedErrorCode,
)
from launcher_auth.api.models import (
    GameProfile,
    GameToken,
    MicrosoftToken,
    ProviderResponse,
    XboxToken,
)
from launcher_auth.config import get_settings

logger = logging.getLogger(__name__)

# Endpoints
AUTHORIZE_ENDPOINT = "https://login.microsoftonline.com/consumers/oauth2/v2.0/authorize"
TOKEN_ENDPOINT = "https://login.microsoftonline.com/consumers/oauth2/v2.0/token"
XBL_ENDPOINT = "https://user.auth.xboxlive.com/user/authenticate"
XSTS_ENDPOINT = "https://xsts.auth.xboxlive.com/xsts/authorize"
GAME_LOGIN_ENDPOINT = "https://api.minecraftservices.com/authentication/login_with_xbox"
GAME_PROFILE_ENDPOINT = "https://api.minecraftservices.com/minecraft/profile"

SCOPES = ["XboxLive.signin", "offline_access"]

XERR_CODES = {
    XERR_NO_XBOX_ACCOUNT: FederatedErrorCode.NO_XBOX_ACCOUNT,
    XERR_XBL_BANNED: FederatedErrorCode.XBL_BANNED,
    XERR_UNDER_18: FederatedErrorCode.UNDER_18,
}

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class FederatedAuthAPI(BaseProviderAPI):
    """One method per network stage of the federated login.

    Usage:
        api = FederatedAuthAPI()
        url = api.get_authorization_url()
        # ... user signs in, the redirect carries ?code=...
        token = await api.get_access_token(code, refresh=False)
    """

    def __init__(
        self,
        client_id: str | None = None,
        redirect_uri: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: int | None = None,
    ):
        super().__init__(client=client, timeout=timeout)
        settings = get_settings()
        self.client_id = client_id or settings.azure_client_id
        self.redirect_uri = redirect_uri or settings.redirect_uri
        if not self.client_id:
            raise ValueError(
                "No Azure client id configured. Set LAUNCHER_AUTH_AZURE_CLIENT_ID."
            )

    def get_authorization_url(self, state: str | None = None) -> str:
        """Get the URL the user signs in at to obtain an authorization code."""
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(SCOPES),
            "prompt": "select_account",
        }
        if state:
            params["state"] = state
        return f"{AUTHORIZE_ENDPOINT}?{urlencode(params)}"

    @staticmethod
    def _unknown(stage: str, error: object) -> ProviderResponse:
        logger.error(f"Federated {stage} failed: {error}")
        return ProviderResponse.failure(FederatedErrorCode.UNKNOWN, error)

    async def get_access_token(
        self, code: str, refresh: bool
    ) -> ProviderResponse[MicrosoftToken]:
        """Redeem an authorization code, or a refresh token when ``refresh``."""
        data = {
            "client_id": self.client_id,
            "scope": " ".join(SCOPES),
            "redirect_uri": self.redirect_uri,
        }
        if refresh:
            data["grant_type"] = "refresh_token"
            data["refresh_token"] = code
        else:
            data["grant_type"] = "authorization_code"
            data["code"] = code

        try:
            response = await self._post(
                TOKEN_ENDPOINT,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            if response.status_code != 200:
                body = self._json(response)
                return self._unknown(
                    "token request",
                    body.get("error_description") or body.get("error") or response.status_code,
                )
            return ProviderResponse.success(MicrosoftToken.model_validate(response.json()))
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            return self._unknown("token request", e)

    async def get_xbl_token(self, ms_access_token: str) -> ProviderResponse[XboxToken]:
        """Authenticate with Xbox Live using the Microsoft access token."""
        payload = {
            "Properties": {
                "AuthMethod": "RPS",
                "SiteName": "user.auth.xboxlive.com",
                "RpsTicket": f"d={ms_access_token}",
            },
            "RelyingParty": "http://auth.xboxlive.com",
            "TokenType": "JWT",
        }

        try:
            response = await self._post(XBL_ENDPOINT, json=payload, headers=JSON_HEADERS)
            if response.status_code != 200:
                return self._unknown("XBL authentication", response.status_code)
            return ProviderResponse.success(XboxToken.model_validate(response.json()))
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            return self._unknown("XBL authentication", e)

    async def get_xsts_token(self, xbl_token: XboxToken) -> ProviderResponse[XboxToken]:
        """Authorize the XBL token for the game services relying party."""
        payload = {
            "Properties": {
                "SandboxId": "RETAIL",
                "UserTokens": [xbl_token.token],
            },
            "RelyingParty": "rp://api.minecraftservices.com/",
            "TokenType": "JWT",
        }

        try:
            response = await self._post(XSTS_ENDPOINT, json=payload, headers=JSON_HEADERS)
            if response.status_code != 200:
                body = self._json(response)
                xerr = body.get("XErr")
                code = XERR_CODES.get(xerr, FederatedErrorCode.UNKNOWN)
                logger.error(f"XSTS authorization failed ({response.status_code}), XErr {xerr}")
                return ProviderResponse.failure(code, body or response.status_code)
            return ProviderResponse.success(XboxToken.model_validate(response.json()))
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            return self._unknown("XSTS authorization", e)

    async def get_game_token(self, xsts_token: XboxToken) -> ProviderResponse[GameToken]:
        """Log in to game services with the XSTS token."""
        payload = {
            "identityToken": f"XBL3.0 x={xsts_token.user_hash};{xsts_token.token}",
        }

        try:
            response = await self._post(GAME_LOGIN_ENDPOINT, json=payload, headers=JSON_HEADERS)
            if response.status_code != 200:
                return self._unknown("game login", response.status_code)
            return ProviderResponse.success(GameToken.model_validate(response.json()))
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            return self._unknown("game login", e)

    async def get_game_profile(self, game_access_token: str) -> ProviderResponse[GameProfile]:
        """Fetch the game profile; a 404 means the account owns no profile."""
        try:
            response = await self._get(
                GAME_PROFILE_ENDPOINT,
                headers={"Authorization": f"Bearer {game_access_token}"},
            )
            if response.status_code == 404:
                logger.error("Game profile not found for this account")
                return ProviderResponse.failure(FederatedErrorCode.NO_PROFILE, 404)
            if response.status_code != 200:
                return self._unknown("profile lookup", response.status_code)
            return ProviderResponse.success(GameProfile.model_validate(response.json()))
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            return self._unknown("profile lookup", e)
