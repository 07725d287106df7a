"""Tests for account records and stores."""

import json
from unittest.mock import MagicMock, patch

import pytest

from launcher_auth.auth.account_store import (
    INDEX_KEY,
    AccountNotFoundError,
    AccountStore,
    KeyringAccountStore,
)
from launcher_auth.auth.accounts import (
    Account,
    CrackedAccount,
    FederatedAccount,
    LegacyAccount,
)


def fill(store: AccountStore) -> None:
    store.add_legacy_account("legacy-uuid", "access-1", "notch@example.com", "Notch")
    store.add_federated_account(
        "federated-uuid", "game-access", "Alex", 2000, "ms-access", "ms-refresh", 3000
    )
    store.add_cracked_account("Steve")
    store.set_client_token("client-1")


class TestAccountRecords:
    """Tests for account serialization."""

    def test_federated_to_dict_and_from_dict(self):
        store = AccountStore()
        fill(store)
        original = store.get_account("federated-uuid")

        restored = Account.from_dict(original.to_dict())

        assert isinstance(restored, FederatedAccount)
        assert restored == original

    def test_legacy_and_cracked_from_dict(self):
        legacy = Account.from_dict(
            {
                "type": "legacy",
                "uuid": "u",
                "display_name": "Notch",
                "access_token": "t",
                "username": "notch",
            }
        )
        cracked = Account.from_dict({"type": "cracked", "uuid": "Steve", "display_name": "Steve"})

        assert isinstance(legacy, LegacyAccount)
        assert legacy.access_token == "t"
        assert isinstance(cracked, CrackedAccount)

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValueError):
            Account.from_dict({"type": "other", "uuid": "u", "display_name": "x"})


class TestAccountStore:
    """Tests for the in-memory aggregate."""

    def test_uuid_is_unique(self):
        """Adding an existing uuid replaces the record."""
        store = AccountStore()
        store.add_legacy_account("uuid", "access-1", "notch", "Notch")
        store.add_legacy_account("uuid", "access-2", "notch", "Notch")

        assert len(store.list_accounts()) == 1
        assert store.get_account("uuid").access_token == "access-2"

    def test_single_selection(self):
        store = AccountStore()
        fill(store)

        assert store.selected_uuid == "federated-uuid"
        store.set_selected_account("legacy-uuid")
        assert store.get_selected_account().uuid == "legacy-uuid"

    def test_select_missing_account(self):
        with pytest.raises(AccountNotFoundError):
            AccountStore().set_selected_account("missing")

    def test_removing_selected_selects_first_remaining(self):
        store = AccountStore()
        fill(store)

        assert store.remove_account("federated-uuid") is True
        assert store.selected_uuid == "legacy-uuid"

    def test_removing_missing_account(self):
        assert AccountStore().remove_account("missing") is False

    def test_update_federated_replaces_session(self):
        store = AccountStore()
        fill(store)

        account = store.update_federated_account(
            "federated-uuid", "game-2", "ms-2", "refresh-2", 5000, 4000
        )

        assert account.access_token == "game-2"
        assert account.expires_at == 4000
        assert account.session.access_token == "ms-2"
        assert account.session.refresh_token == "refresh-2"
        assert account.session.expires_at == 5000
        assert account.display_name == "Alex"

    def test_update_wrong_kind(self):
        store = AccountStore()
        fill(store)

        with pytest.raises(TypeError):
            store.update_legacy_account("Steve", "access")


class TestKeyringAccountStore:
    """Tests for KeyringAccountStore."""

    @pytest.fixture
    def mock_keyring(self):
        """Mock keyring module backed by a dict."""
        import keyring.errors

        entries: dict[tuple[str, str], str] = {}

        def delete_password(service, key):
            if (service, key) not in entries:
                raise keyring.errors.PasswordDeleteError()
            del entries[(service, key)]

        with patch("launcher_auth.auth.account_store.keyring") as mock:
            mock.errors = keyring.errors
            mock.set_password.side_effect = lambda s, k, v: entries.__setitem__((s, k), v)
            mock.get_password.side_effect = lambda s, k: entries.get((s, k))
            mock.delete_password.side_effect = delete_password
            mock.entries = entries
            yield mock

    @pytest.fixture
    def mock_settings(self):
        with patch("launcher_auth.auth.account_store.get_settings") as mock:
            settings = MagicMock()
            settings.keyring_service = "launcher-auth-test"
            mock.return_value = settings
            yield settings

    def test_service_from_settings(self, mock_keyring, mock_settings):
        assert KeyringAccountStore().service == "launcher-auth-test"

    def test_persist_and_load(self, mock_keyring, mock_settings):
        store = KeyringAccountStore()
        fill(store)
        store.persist()

        loaded = KeyringAccountStore().load()

        assert {a.uuid for a in loaded.list_accounts()} == {
            "legacy-uuid",
            "federated-uuid",
            "Steve",
        }
        assert loaded.selected_uuid == "federated-uuid"
        assert loaded.get_client_token() == "client-1"
        assert loaded.get_account("federated-uuid") == store.get_account("federated-uuid")

    def test_persist_deletes_removed_accounts(self, mock_keyring, mock_settings):
        store = KeyringAccountStore()
        fill(store)
        store.persist()

        store.remove_account("Steve")
        store.persist()

        assert ("launcher-auth-test", "account:Steve") not in mock_keyring.entries
        index = json.loads(mock_keyring.entries[("launcher-auth-test", INDEX_KEY)])
        assert "Steve" not in index["accounts"]

    def test_load_empty_keyring(self, mock_keyring, mock_settings):
        store = KeyringAccountStore().load()

        assert store.list_accounts() == []
        assert store.get_selected_account() is None
        assert store.get_client_token() is None

    def test_load_skips_unreadable_entries(self, mock_keyring, mock_settings):
        mock_keyring.entries[("launcher-auth-test", INDEX_KEY)] = json.dumps(
            {"accounts": ["good", "bad"], "selected": "bad", "client_token": None}
        )
        mock_keyring.entries[("launcher-auth-test", "account:good")] = json.dumps(
            {"type": "cracked", "uuid": "good", "display_name": "good"}
        )
        mock_keyring.entries[("launcher-auth-test", "account:bad")] = "not valid json"

        store = KeyringAccountStore().load()

        assert [a.uuid for a in store.list_accounts()] == ["good"]
        assert store.selected_uuid is None

    def test_load_invalid_index(self, mock_keyring, mock_settings):
        mock_keyring.entries[("launcher-auth-test", INDEX_KEY)] = "not valid json"

        assert KeyringAccountStore().load().list_accounts() == []

    def test_load_index_not_an_object(self, mock_keyring, mock_settings):
        """An index that parses but is not an object is ignored."""
        mock_keyring.entries[("launcher-auth-test", INDEX_KEY)] = json.dumps(["x"])

        store = KeyringAccountStore().load()

        assert store.list_accounts() == []
        assert store.get_selected_account() is None
