"""Account storage: the store interface, an in-memory aggregate and a keyring backend."""

import json
import logging
from typing import Protocol

import keyring

from launcher_auth.auth.accounts import (
    Account,
    CrackedAccount,
    FederatedAccount,
    FederatedSession,
    LegacyAccount,
)
from launcher_auth.config import get_settings

logger = logging.getLogger(__name__)

INDEX_KEY = "index"


class AccountNotFoundError(KeyError):
    """No account is stored under the given uuid."""

    def __init__(self, uuid: str):
        super().__init__(uuid)
        self.uuid = uuid

    def __str__(self) -> str:
        return f"No account stored with uuid '{self.uuid}'"


class CredentialStore(Protocol):
    """Persists and retrieves account records."""

    def add_legacy_account(
        self, uuid: str, access_token: str, username: str, display_name: str
    ) -> LegacyAccount: ...

    def add_federated_account(
        self,
        uuid: str,
        access_token: str,
        display_name: str,
        expires_at: int,
        ms_access_token: str,
        ms_refresh_token: str,
        ms_expires_at: int,
    ) -> FederatedAccount: ...

    def add_cracked_account(self, username: str) -> CrackedAccount: ...

    def get_account(self, uuid: str) -> Account | None: ...

    def get_selected_account(self) -> Account | None: ...

    def set_selected_account(self, uuid: str) -> Account: ...

    def list_accounts(self) -> list[Account]: ...

    def update_legacy_account(self, uuid: str, access_token: str) -> LegacyAccount: ...

    def update_federated_account(
        self,
        uuid: str,
        access_token: str,
        ms_access_token: str,
        ms_refresh_token: str,
        ms_expires_at: int,
        expires_at: int,
    ) -> FederatedAccount: ...

    def remove_account(self, uuid: str) -> bool: ...

    def get_client_token(self) -> str | None: ...

    def set_client_token(self, client_token: str) -> None: ...

    def persist(self) -> None: ...


class AccountStore:
    """In-memory account aggregate.

    Holds every account, the selected uuid and the shared legacy client
    token. ``persist`` is a no-op here; subclasses write the state out.
    """

    def __init__(self):
        self._accounts: dict[str, Account] = {}
        self._selected: str | None = None
        self._client_token: str | None = None

    @property
    def selected_uuid(self) -> str | None:
        return self._selected

    def _put(self, account: Account, select: bool) -> None:
        self._accounts[account.uuid] = account
        if select:
            self._selected = account.uuid

    def add_legacy_account(
        self, uuid: str, access_token: str, username: str, display_name: str
    ) -> LegacyAccount:
        """Store a legacy account and select it."""
        account = LegacyAccount(
            uuid=uuid,
            display_name=display_name,
            access_token=access_token,
            username=username,
        )
        self._put(account, select=True)
        return account

    def add_federated_account(
        self,
        uuid: str,
        access_token: str,
        display_name: str,
        expires_at: int,
        ms_access_token: str,
        ms_refresh_token: str,
        ms_expires_at: int,
    ) -> FederatedAccount:
        """Store a federated account and select it."""
        account = FederatedAccount(
            uuid=uuid,
            display_name=display_name,
            access_token=access_token,
            expires_at=expires_at,
            session=FederatedSession(
                access_token=ms_access_token,
                refresh_token=ms_refresh_token,
                expires_at=ms_expires_at,
            ),
        )
        self._put(account, select=True)
        return account

    def add_cracked_account(self, username: str) -> CrackedAccount:
        """Store an offline account keyed by its username; selection is kept."""
        account = CrackedAccount(uuid=username, display_name=username)
        self._put(account, select=False)
        return account

    def get_account(self, uuid: str) -> Account | None:
        return self._accounts.get(uuid)

    def _require(self, uuid: str) -> Account:
        account = self._accounts.get(uuid)
        if account is None:
            raise AccountNotFoundError(uuid)
        return account

    def get_selected_account(self) -> Account | None:
        if self._selected is None:
            return None
        return self._accounts.get(self._selected)

    def set_selected_account(self, uuid: str) -> Account:
        account = self._require(uuid)
        self._selected = uuid
        return account

    def list_accounts(self) -> list[Account]:
        return list(self._accounts.values())

    def update_legacy_account(self, uuid: str, access_token: str) -> LegacyAccount:
        account = self._require(uuid)
        if not isinstance(account, LegacyAccount):
            raise TypeError(f"Account '{uuid}' is not a legacy account")
        account.access_token = access_token
        return account

    def update_federated_account(
        self,
        uuid: str,
        access_token: str,
        ms_access_token: str,
        ms_refresh_token: str,
        ms_expires_at: int,
        expires_at: int,
    ) -> FederatedAccount:
        account = self._require(uuid)
        if not isinstance(account, FederatedAccount):
            raise TypeError(f"Account '{uuid}' is not a federated account")
        account.access_token = access_token
        account.expires_at = expires_at
        account.session = FederatedSession(
            access_token=ms_access_token,
            refresh_token=ms_refresh_token,
            expires_at=ms_expires_at,
        )
        return account

    def remove_account(self, uuid: str) -> bool:
        """Remove an account.

        When the selected account is removed, the first remaining account
        becomes selected (or none).

        Returns:
            True if an account was removed, False if none was stored
        """
        if self._accounts.pop(uuid, None) is None:
            return False
        if self._selected == uuid:
            self._selected = next(iter(self._accounts), None)
        return True

    def get_client_token(self) -> str | None:
        return self._client_token

    def set_client_token(self, client_token: str) -> None:
        self._client_token = client_token

    def persist(self) -> None:
        pass


class KeyringAccountStore(AccountStore):
    """Account store persisted in the OS keyring.

    Each account is one JSON entry keyed by ``account:<uuid>``; an index
    entry lists the uuids, the selected uuid and the client token.
    """

    def __init__(self, service: str | None = None):
        super().__init__()
        self.service = service or get_settings().keyring_service
        self._persisted: set[str] = set()

    @staticmethod
    def _account_key(uuid: str) -> str:
        return f"account:{uuid}"

    def load(self) -> "KeyringAccountStore":
        """Load accounts from the keyring, skipping unreadable entries."""
        index_json = keyring.get_password(self.service, INDEX_KEY)
        if not index_json:
            return self
        try:
            index = json.loads(index_json)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable account index in keyring")
            return self
        if not isinstance(index, dict):
            logger.warning("Ignoring account index in keyring: not a JSON object")
            return self

        for uuid in index.get("accounts", []):
            data_json = keyring.get_password(self.service, self._account_key(uuid))
            if not data_json:
                continue
            try:
                account = Account.from_dict(json.loads(data_json))
            except (json.JSONDecodeError, KeyError, TypeError, ValueError):
                logger.warning(f"Skipping unreadable account entry: {uuid}")
                continue
            self._accounts[account.uuid] = account
            self._persisted.add(account.uuid)

        selected = index.get("selected")
        self._selected = selected if selected in self._accounts else None
        self._client_token = index.get("client_token")
        return self

    def persist(self) -> None:
        """Write every account and the index; delete entries of removed accounts."""
        for account in self._accounts.values():
            keyring.set_password(
                self.service,
                self._account_key(account.uuid),
                json.dumps(account.to_dict()),
            )

        for uuid in self._persisted - self._accounts.keys():
            try:
                keyring.delete_password(self.service, self._account_key(uuid))
            except keyring.errors.PasswordDeleteError:
                pass

        index = {
            "accounts": list(self._accounts),
            "selected": self._selected,
            "client_token": self._client_token,
        }
        keyring.set_password(self.service, INDEX_KEY, json.dumps(index))
        self._persisted = set(self._accounts)
        logger.debug(f"Persisted {len(self._accounts)} account(s) to keyring")
