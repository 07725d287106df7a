"""Tests for the expiry policy."""

import pytest

from launcher_auth.auth.expiry import compute_expiry, now_ms, select_refresh_mode
from launcher_auth.auth.federated import AuthMode


class TestComputeExpiry:
    """Tests for compute_expiry."""

    @pytest.mark.parametrize("now", [0, 1_700_000_000_000, 42])
    @pytest.mark.parametrize("expires_in", [11, 3600, 86400])
    def test_margin_is_independent_of_now(self, now, expires_in):
        """The deadline is always expires_in minus 10 seconds after now."""
        assert compute_expiry(now, expires_in) - now == (expires_in - 10) * 1000

    def test_now_ms_is_milliseconds(self):
        # Anything after 2001 in ms has 13 digits
        assert len(str(now_ms())) == 13


class TestSelectRefreshMode:
    """Tests for select_refresh_mode."""

    NOW = 1_700_000_000_000

    def test_valid_game_token_needs_nothing(self):
        assert select_refresh_mode(self.NOW, self.NOW + 1, self.NOW - 1) is None

    def test_only_game_token_expired(self):
        """A live Microsoft session means only the game token is renewed."""
        mode = select_refresh_mode(self.NOW, self.NOW - 1, self.NOW + 1000)
        assert mode is AuthMode.MC_REFRESH

    def test_both_expired(self):
        mode = select_refresh_mode(self.NOW, self.NOW - 1, self.NOW - 1)
        assert mode is AuthMode.MS_REFRESH

    def test_expiry_equal_to_now_is_expired(self):
        mode = select_refresh_mode(self.NOW, self.NOW, self.NOW)
        assert mode is AuthMode.MS_REFRESH
