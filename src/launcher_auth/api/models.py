"""Payload models and the tagged result returned by provider clients."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from launcher_auth.api.error_codes import FederatedErrorCode, LegacyErrorCode

T = TypeVar("T")


class ProviderModel(BaseModel):
    """Base model with common configuration.

    All provider payload models inherit from this class to get:
    - populate_by_name: Allow both alias and field name in input
    - extra="ignore": Ignore unknown fields from API responses
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


class ResponseStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ProviderResponse(Generic[T]):
    """Tagged result of one provider call.

    Either ``status`` is SUCCESS and ``data`` holds the parsed payload, or
    ``status`` is ERROR and ``error_code`` names the provider failure.
    ``error`` keeps the underlying cause for logging only.
    """

    status: ResponseStatus
    data: T | None = None
    error_code: LegacyErrorCode | FederatedErrorCode | None = None
    error: object | None = None

    @property
    def ok(self) -> bool:
        return self.status is ResponseStatus.SUCCESS

    @classmethod
    def success(cls, data: T) -> "ProviderResponse[T]":
        return cls(status=ResponseStatus.SUCCESS, data=data)

    @classmethod
    def failure(
        cls,
        error_code: LegacyErrorCode | FederatedErrorCode,
        error: object | None = None,
    ) -> "ProviderResponse[T]":
        return cls(status=ResponseStatus.ERROR, error_code=error_code, error=error)


# Legacy provider payloads


class LegacyProfile(ProviderModel):
    """A game profile owned by a legacy account."""

    id: str
    name: str


class LegacySession(ProviderModel):
    """Response of the legacy authenticate and refresh endpoints."""

    access_token: str = Field(alias="accessToken")
    client_token: str = Field(alias="clientToken")
    selected_profile: LegacyProfile | None = Field(default=None, alias="selectedProfile")
    available_profiles: list[LegacyProfile] = Field(
        default_factory=list, alias="availableProfiles"
    )


# Federated provider payloads


class MicrosoftToken(ProviderModel):
    """OAuth token endpoint response."""

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str | None = None
    scope: str | None = None


class XboxToken(ProviderModel):
    """XBL or XSTS token with the user hash from its display claims."""

    token: str = Field(alias="Token")
    not_after: str | None = Field(default=None, alias="NotAfter")
    display_claims: dict = Field(default_factory=dict, alias="DisplayClaims")

    @property
    def user_hash(self) -> str | None:
        """Get the user hash (uhs) of the first xui claim."""
        xui = self.display_claims.get("xui") or []
        if not xui:
            return None
        return xui[0].get("uhs")


class GameToken(ProviderModel):
    """Game services access token obtained with an XSTS token."""

    access_token: str
    expires_in: int
    username: str | None = None
    token_type: str | None = None


class GameProfile(ProviderModel):
    """Game profile fetched with the game access token."""

    id: str
    name: str
