"""Tests for the command line interface."""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from launcher_auth.api.error_codes import LegacyErrorCode
from launcher_auth.api.models import ProviderResponse
from launcher_auth.auth import AccountManager, AccountStore, LegacyAuthFlow
from launcher_auth.main import app

runner = CliRunner()


@pytest.fixture
def legacy_client():
    return AsyncMock()


@pytest.fixture
def manager(legacy_client):
    """Manager over an in-memory store, without Microsoft login."""
    manager = AccountManager(AccountStore(), LegacyAuthFlow(legacy_client), None)
    with patch("launcher_auth.main.build_manager", return_value=manager):
        yield manager


class TestCommands:
    """Tests for the CLI commands."""

    def test_login_offline(self, manager):
        result = runner.invoke(app, ["login-offline", "Steve"])

        assert result.exit_code == 0
        assert manager.store.get_account("Steve") is not None

    def test_login_offline_invalid_name(self, manager):
        result = runner.invoke(app, ["login-offline", "no spaces allowed"])

        assert result.exit_code == 1
        assert manager.store.list_accounts() == []

    def test_select(self, manager):
        manager.add_cracked_account("Steve")

        result = runner.invoke(app, ["select", "Steve"])

        assert result.exit_code == 0
        assert manager.store.get_selected_account().uuid == "Steve"

    def test_select_unknown_account(self, manager):
        result = runner.invoke(app, ["select", "missing"])

        assert result.exit_code == 1

    def test_validate_without_selection(self, manager):
        result = runner.invoke(app, ["validate"])

        assert result.exit_code == 1

    def test_login_federated_not_configured(self, manager):
        result = runner.invoke(app, ["login-federated", "auth-code"])

        assert result.exit_code == 1
        assert "client id" in result.output

    def test_accounts_lists_names(self, manager):
        manager.add_cracked_account("Steve")

        result = runner.invoke(app, ["accounts"])

        assert result.exit_code == 0
        assert "Steve" in result.output


class TestAuthErrorOutput:
    """Tests for how classified login failures are shown."""

    @pytest.fixture(autouse=True)
    def rejected_login(self, legacy_client):
        legacy_client.authenticate.return_value = ProviderResponse.failure(
            LegacyErrorCode.ERROR_INVALID_CREDENTIALS
        )

    def test_shows_title(self, manager):
        result = runner.invoke(app, ["login-legacy", "notch", "--password", "wrong"])

        assert result.exit_code == 1
        assert "Invalid credentials" in result.output
        assert "Slot:" not in result.output

    def test_verbose_shows_slot_and_code(self, manager):
        result = runner.invoke(app, ["--verbose", "login-legacy", "notch", "--password", "wrong"])

        assert result.exit_code == 1
        assert "Slot: legacy.invalid_credentials" in result.output
        assert "Code: invalid_credentials" in result.output
