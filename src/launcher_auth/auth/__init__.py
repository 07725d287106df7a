"""Authentication module for Launcher Auth."""

from launcher_auth.auth.account_store import (
    AccountNotFoundError,
    AccountStore,
    CredentialStore,
    KeyringAccountStore,
)
from launcher_auth.auth.accounts import (
    Account,
    AccountType,
    CrackedAccount,
    FederatedAccount,
    FederatedSession,
    LegacyAccount,
)
from launcher_auth.auth.errors import (
    AuthError,
    DisplayableError,
    federated_error_displayable,
    legacy_error_displayable,
)
from launcher_auth.auth.expiry import compute_expiry, now_ms, select_refresh_mode
from launcher_auth.auth.federated import AuthMode, FederatedAuthFlow, FederatedAuthResult
from launcher_auth.auth.legacy import LegacyAuthFlow
from launcher_auth.auth.manager import AccountManager

__all__ = [
    # Orchestration
    "AccountManager",
    # Flows
    "LegacyAuthFlow",
    "FederatedAuthFlow",
    "FederatedAuthResult",
    "AuthMode",
    # Expiry policy
    "compute_expiry",
    "now_ms",
    "select_refresh_mode",
    # Errors
    "AuthError",
    "DisplayableError",
    "legacy_error_displayable",
    "federated_error_displayable",
    # Accounts and storage
    "Account",
    "AccountType",
    "LegacyAccount",
    "FederatedAccount",
    "FederatedSession",
    "CrackedAccount",
    "CredentialStore",
    "AccountStore",
    "KeyringAccountStore",
    "AccountNotFoundError",
]
