"""Identity provider clients for Launcher Auth."""

from launcher_auth.api.error_codes import FederatedErrorCode, LegacyErrorCode
from launcher_auth.api.federated import FederatedAuthAPI
from launcher_auth.api.legacy import LegacyAuthAPI
from launcher_auth.api.models import (
    GameProfile,
    GameToken,
    LegacyProfile,
    LegacySession,
    MicrosoftToken,
    ProviderModel,
    ProviderResponse,
    ResponseStatus,
    XboxToken,
)
from launcher_auth.api.protocols import FederatedProviderClient, LegacyProviderClient

__all__ = [
    # Clients
    "LegacyAuthAPI",
    "FederatedAuthAPI",
    "LegacyProviderClient",
    "FederatedProviderClient",
    # Error codes
    "LegacyErrorCode",
    "FederatedErrorCode",
    # Results
    "ProviderResponse",
    "ResponseStatus",
    # Models
    "ProviderModel",
    "LegacyProfile",
    "LegacySession",
    "MicrosoftToken",
    "XboxToken",
    "GameToken",
    "GameProfile",
]
