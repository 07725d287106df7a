"""Displayable errors for both identity providers.

Each provider error code maps to exactly one message slot. The English
title/description are defaults; a UI may translate by slot.

Legacy codes are looked up strictly: a code without a slot is a programming
error and raises. Federated codes fall back to the generic "unknown" slot.
"""

from dataclasses import dataclass

from launcher_auth.api.error_codes import FederatedErrorCode, LegacyErrorCode


@dataclass(frozen=True)
class DisplayableError:
    """User-facing error information."""

    slot: str
    title: str
    description: str


class AuthError(Exception):
    """A classified authentication failure."""

    def __init__(
        self,
        displayable: DisplayableError,
        code: LegacyErrorCode | FederatedErrorCode | None = None,
    ):
        super().__init__(f"{displayable.title}: {displayable.description}")
        self.displayable = displayable
        self.code = code

    @property
    def title(self) -> str:
        return self.displayable.title

    @property
    def description(self) -> str:
        return self.displayable.description


LEGACY_ERRORS: dict[LegacyErrorCode, DisplayableError] = {
    LegacyErrorCode.ERROR_METHOD_NOT_ALLOWED: DisplayableError(
        slot="legacy.method_not_allowed",
        title="Method not allowed",
        description="This authentication method is not allowed by the server.",
    ),
    LegacyErrorCode.ERROR_NOT_FOUND: DisplayableError(
        slot="legacy.not_found",
        title="Account not found",
        description="The account does not exist on the authentication server.",
    ),
    LegacyErrorCode.ERROR_USER_MIGRATED: DisplayableError(
        slot="legacy.user_migrated",
        title="Account migrated",
        description="This account has been migrated. Log in with the migrated account instead.",
    ),
    LegacyErrorCode.ERROR_INVALID_CREDENTIALS: DisplayableError(
        slot="legacy.invalid_credentials",
        title="Invalid credentials",
        description="The username or password you entered is incorrect.",
    ),
    LegacyErrorCode.ERROR_RATELIMIT: DisplayableError(
        slot="legacy.ratelimit",
        title="Too many attempts",
        description="Too many login attempts were made. Wait a while and try again.",
    ),
    LegacyErrorCode.ERROR_INVALID_TOKEN: DisplayableError(
        slot="legacy.invalid_token",
        title="Invalid access token",
        description="The access token is no longer valid. Log in again.",
    ),
    LegacyErrorCode.ERROR_ACCESS_TOKEN_HAS_PROFILE: DisplayableError(
        slot="legacy.access_token_has_profile",
        title="Token already has a profile",
        description="The access token is already bound to a game profile.",
    ),
    LegacyErrorCode.ERROR_CREDENTIALS_MISSING: DisplayableError(
        slot="legacy.credentials_missing",
        title="Missing credentials",
        description="No credentials were supplied for authentication.",
    ),
    LegacyErrorCode.ERROR_INVALID_SALT_VERSION: DisplayableError(
        slot="legacy.invalid_salt_version",
        title="Invalid salt version",
        description="The session salt version is not supported.",
    ),
    LegacyErrorCode.ERROR_UNSUPPORTED_MEDIA_TYPE: DisplayableError(
        slot="legacy.unsupported_media_type",
        title="Unsupported media type",
        description="The server does not accept the request content type.",
    ),
    LegacyErrorCode.ERROR_GONE: DisplayableError(
        slot="legacy.gone",
        title="Account removed",
        description="This account has been removed from the authentication server.",
    ),
    LegacyErrorCode.ERROR_UNREACHABLE: DisplayableError(
        slot="legacy.unreachable",
        title="Server unreachable",
        description="The authentication server could not be reached. Try again later.",
    ),
    LegacyErrorCode.ERROR_NOT_PAID: DisplayableError(
        slot="legacy.not_paid",
        title="Game not purchased",
        description="This account does not own the game and cannot be used to play.",
    ),
    LegacyErrorCode.UNKNOWN: DisplayableError(
        slot="legacy.unknown",
        title="Unknown error",
        description="An unknown error occurred while logging in. Try again later.",
    ),
}

FEDERATED_UNKNOWN = DisplayableError(
    slot="federated.unknown",
    title="Unknown error",
    description="An unknown error occurred while logging in with Microsoft. Try again later.",
)

FEDERATED_ERRORS: dict[FederatedErrorCode, DisplayableError] = {
    FederatedErrorCode.NO_PROFILE: DisplayableError(
        slot="federated.no_profile",
        title="No game profile",
        description="This Microsoft account has no game profile. "
        "Sign in on the game website once, then try again.",
    ),
    FederatedErrorCode.NO_XBOX_ACCOUNT: DisplayableError(
        slot="federated.no_xbox_account",
        title="No Xbox account",
        description="This Microsoft account has no Xbox account linked to it.",
    ),
    FederatedErrorCode.XBL_BANNED: DisplayableError(
        slot="federated.xbl_banned",
        title="Xbox Live unavailable",
        description="This Microsoft account is banned or Xbox Live is not available in its country.",
    ),
    FederatedErrorCode.UNDER_18: DisplayableError(
        slot="federated.under_18",
        title="Account under 18",
        description="This account belongs to a minor and must be added to a family by an adult.",
    ),
    FederatedErrorCode.UNKNOWN: FEDERATED_UNKNOWN,
}


def legacy_error_displayable(code: LegacyErrorCode) -> DisplayableError:
    """Get the displayable error for a legacy provider code.

    Raises:
        ValueError: If the code is not a LegacyErrorCode with a slot
    """
    if not isinstance(code, LegacyErrorCode) or code not in LEGACY_ERRORS:
        raise ValueError(f"Unknown legacy error code: {code!r}")
    return LEGACY_ERRORS[code]


def federated_error_displayable(code: FederatedErrorCode | None) -> DisplayableError:
    """Get the displayable error for a federated provider code."""
    if not isinstance(code, FederatedErrorCode):
        return FEDERATED_UNKNOWN
    return FEDERATED_ERRORS.get(code, FEDERATED_UNKNOWN)


def legacy_auth_error(code: LegacyErrorCode) -> AuthError:
    return AuthError(legacy_error_displayable(code), code)


def federated_auth_error(code: FederatedErrorCode | None) -> AuthError:
    return AuthError(federated_error_displayable(code), code)
