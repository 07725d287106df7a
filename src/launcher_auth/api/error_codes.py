"""Error codes reported by the identity provider clients."""

from enum import Enum


class LegacyErrorCode(str, Enum):
    """Failure codes of the legacy username/password auth server."""

    ERROR_METHOD_NOT_ALLOWED = "method_not_allowed"
    ERROR_NOT_FOUND = "not_found"
    ERROR_USER_MIGRATED = "user_migrated"
    ERROR_INVALID_CREDENTIALS = "invalid_credentials"
    ERROR_RATELIMIT = "ratelimit"
    ERROR_INVALID_TOKEN = "invalid_token"
    ERROR_ACCESS_TOKEN_HAS_PROFILE = "access_token_has_profile"
    ERROR_CREDENTIALS_MISSING = "credentials_missing"
    ERROR_INVALID_SALT_VERSION = "invalid_salt_version"
    ERROR_UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    ERROR_GONE = "gone"
    ERROR_UNREACHABLE = "unreachable"
    ERROR_NOT_PAID = "not_paid"
    UNKNOWN = "unknown"


class FederatedErrorCode(str, Enum):
    """Failure codes of the Microsoft / Xbox Live exchange chain."""

    NO_PROFILE = "no_profile"
    NO_XBOX_ACCOUNT = "no_xbox_account"
    XBL_BANNED = "xbl_banned"
    UNDER_18 = "under_18"
    UNKNOWN = "unknown"


# XSTS "XErr" values
XERR_NO_XBOX_ACCOUNT = 2148916233
XERR_XBL_BANNED = 2148916235
XERR_UNDER_18 = 2148916238
