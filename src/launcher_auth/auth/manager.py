"""Account orchestration: login, logout and validation of stored accounts.

All account mutation goes through AccountManager. Provider failures reach
the caller as AuthError; store failures propagate unchanged.
"""

import logging
import re
from typing import Callable

from launcher_auth.auth.account_store import AccountNotFoundError, CredentialStore
from launcher_auth.auth.accounts import (
    Account,
    AccountType,
    CrackedAccount,
    FederatedAccount,
    LegacyAccount,
)
from launcher_auth.auth.errors import AuthError
from launcher_auth.auth.expiry import compute_expiry, now_ms, select_refresh_mode
from launcher_auth.auth.federated import AuthMode, FederatedAuthFlow
from launcher_auth.auth.legacy import LegacyAuthFlow

logger = logging.getLogger(__name__)

CRACKED_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,16}$")


def validate_cracked_username(username: str | None) -> str:
    """Validate an offline username.

    Raises:
        ValueError: If the username is empty or not 3-16 letters, digits or '_'
    """
    if not username:
        raise ValueError("Username cannot be empty")
    if not CRACKED_USERNAME_PATTERN.match(username):
        raise ValueError(f"Invalid username: {username}")
    return username


class AccountManager:
    """Adds, removes and validates accounts of every kind.

    Usage:
        manager = AccountManager(store, LegacyAuthFlow(legacy_api), FederatedAuthFlow(ms_api))
        account = await manager.add_federated_account(auth_code)
        if not await manager.validate_selected():
            ...  # interactive login required
    """

    def __init__(
        self,
        store: CredentialStore,
        legacy: LegacyAuthFlow,
        federated: FederatedAuthFlow | None,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self._legacy = legacy
        self._federated = federated
        self._clock = clock

    @property
    def federated_enabled(self) -> bool:
        return self._federated is not None

    def _federated_flow(self) -> FederatedAuthFlow:
        if self._federated is None:
            raise RuntimeError("Microsoft login is not configured")
        return self._federated

    def _require(self, uuid: str) -> Account:
        account = self.store.get_account(uuid)
        if account is None:
            raise AccountNotFoundError(uuid)
        return account

    # Adding accounts

    async def add_legacy_account(self, username: str, password: str) -> LegacyAccount:
        """Log in to the legacy auth server and store the account.

        Raises:
            AuthError: If authentication fails or the game is not owned
        """
        session = await self._legacy.authenticate(
            username, password, self.store.get_client_token()
        )
        account = self.store.add_legacy_account(
            session.selected_profile.id,
            session.access_token,
            username,
            session.selected_profile.name,
        )
        if self.store.get_client_token() is None:
            self.store.set_client_token(session.client_token)
        self.store.persist()

        logger.info(f"Legacy account added: {account.display_name}")
        return account

    def add_cracked_account(self, username: str) -> CrackedAccount:
        """Store an offline account. No credentials are verified.

        Raises:
            ValueError: If the username is not a valid offline name
        """
        account = self.store.add_cracked_account(validate_cracked_username(username))
        self.store.persist()
        logger.info(f"Offline account added: {account.display_name}")
        return account

    async def add_federated_account(self, auth_code: str) -> FederatedAccount:
        """Exchange a Microsoft authorization code and store the account.

        Raises:
            AuthError: If any stage of the exchange chain fails
        """
        result = await self._federated_flow().exchange_chain(auth_code, AuthMode.FULL)
        now = self._clock()

        account = self.store.add_federated_account(
            result.profile.id,
            result.game_token.access_token,
            result.profile.name,
            compute_expiry(now, result.game_token.expires_in),
            result.ms_token.access_token,
            result.ms_token.refresh_token,
            compute_expiry(now, result.ms_token.expires_in),
        )
        self.store.persist()

        logger.info(f"Microsoft account added: {account.display_name}")
        return account

    # Removing accounts

    async def remove_legacy_account(self, uuid: str) -> None:
        """Invalidate the account's token remotely, then delete it locally.

        Raises:
            AuthError: If invalidation fails; the account is kept
            AccountNotFoundError: If no account has this uuid
        """
        account = self._require(uuid)
        if not isinstance(account, LegacyAccount):
            raise TypeError(f"Account '{uuid}' is not a legacy account")
        await self._legacy.invalidate(account.access_token, self.store.get_client_token())
        self.store.remove_account(uuid)
        self.store.persist()
        logger.info(f"Legacy account removed: {account.display_name}")

    def remove_cracked_account(self, uuid: str) -> None:
        """Delete an offline account locally.

        Raises:
            AccountNotFoundError: If no account has this uuid
            TypeError: If the account is not an offline account
        """
        if not isinstance(self._require(uuid), CrackedAccount):
            raise TypeError(f"Account '{uuid}' is not an offline account")
        self.store.remove_account(uuid)
        self.store.persist()
        logger.info(f"Offline account removed: {uuid}")

    def remove_federated_account(self, uuid: str) -> None:
        """Delete a Microsoft account locally.

        Signing out of the Microsoft session is left to the caller.

        Raises:
            AccountNotFoundError: If no account has this uuid
            TypeError: If the account is not a Microsoft account
        """
        if not isinstance(self._require(uuid), FederatedAccount):
            raise TypeError(f"Account '{uuid}' is not a Microsoft account")
        self.store.remove_account(uuid)
        self.store.persist()
        logger.info(f"Microsoft account removed: {uuid}")

    async def remove_account(self, uuid: str) -> None:
        """Remove any stored account using the removal its type requires."""
        account = self._require(uuid)
        if account.type is AccountType.LEGACY:
            await self.remove_legacy_account(uuid)
        elif account.type is AccountType.FEDERATED:
            self.remove_federated_account(uuid)
        else:
            self.remove_cracked_account(uuid)

    def select_account(self, uuid: str) -> Account:
        """Make the given account the selected one."""
        account = self.store.set_selected_account(uuid)
        self.store.persist()
        return account

    # Validation

    async def validate_selected(self) -> bool:
        """Check the selected account, refreshing its tokens when needed.

        Returns:
            True if the account is usable, False if a new login is required
            or no account is selected. Never raises.
        """
        account = self.store.get_selected_account()
        if account is None:
            logger.info("No account selected")
            return False
        return await self._validate(account)

    async def validate_account(self, uuid: str) -> bool:
        """Like validate_selected, for any stored account."""
        account = self.store.get_account(uuid)
        if account is None:
            return False
        return await self._validate(account)

    async def _validate(self, account: Account) -> bool:
        try:
            if isinstance(account, FederatedAccount):
                return await self._validate_federated(account)
            if isinstance(account, LegacyAccount):
                return await self._validate_legacy(account)
            return True
        except Exception as e:
            logger.error(f"Validation of {account.uuid} failed: {e}", exc_info=True)
            return False

    async def _validate_legacy(self, account: LegacyAccount) -> bool:
        client_token = self.store.get_client_token()
        try:
            valid = await self._legacy.validate(account.access_token, client_token)
        except AuthError as e:
            logger.warning(f"Could not validate access token of {account.display_name}: {e}")
            return False

        if valid:
            logger.info("Account access token validated.")
            return True

        try:
            session = await self._legacy.refresh(account.access_token, client_token)
        except AuthError as e:
            logger.warning(f"Access token refresh failed for {account.display_name}: {e}")
            return False

        self.store.update_legacy_account(account.uuid, session.access_token)
        self.store.persist()
        logger.info(f"Access token refreshed for {account.display_name}")
        return True

    async def _validate_federated(self, account: FederatedAccount) -> bool:
        now = self._clock()
        mode = select_refresh_mode(now, account.expires_at, account.session.expires_at)
        if mode is None:
            return True

        session = account.session
        entry = session.access_token if mode is AuthMode.MC_REFRESH else session.refresh_token
        try:
            result = await self._federated_flow().exchange_chain(entry, mode)
        except AuthError as e:
            logger.warning(f"Token refresh ({mode.name}) failed for {account.display_name}: {e}")
            return False

        game_expires_at = compute_expiry(now, result.game_token.expires_in)
        if mode is AuthMode.MC_REFRESH:
            self.store.update_federated_account(
                account.uuid,
                result.game_token.access_token,
                session.access_token,
                session.refresh_token,
                session.expires_at,
                game_expires_at,
            )
        else:
            self.store.update_federated_account(
                account.uuid,
                result.game_token.access_token,
                result.ms_token.access_token,
                result.ms_token.refresh_token,
                compute_expiry(now, result.ms_token.expires_in),
                game_expires_at,
            )
        self.store.persist()

        logger.info(f"Tokens refreshed ({mode.name}) for {account.display_name}")
        return True
