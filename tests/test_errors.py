"""Tests for the error classifier."""

import pytest

from launcher_auth.api.error_codes import FederatedErrorCode, LegacyErrorCode
from launcher_auth.auth.errors import (
    AuthError,
    federated_error_displayable,
    legacy_error_displayable,
)


class TestLegacyErrors:
    """Tests for legacy_error_displayable."""

    def test_every_code_has_a_distinct_slot(self):
        """Each legacy code maps to its own message slot."""
        slots = [legacy_error_displayable(code).slot for code in LegacyErrorCode]
        assert len(slots) == len(set(slots)) == len(LegacyErrorCode)

    def test_messages_are_not_empty(self):
        for code in LegacyErrorCode:
            error = legacy_error_displayable(code)
            assert error.title
            assert error.description

    def test_unknown_code_is_fatal(self):
        """An unrecognized legacy code raises instead of defaulting."""
        with pytest.raises(ValueError):
            legacy_error_displayable("no_such_code")

    def test_federated_code_is_not_a_legacy_code(self):
        with pytest.raises(ValueError):
            legacy_error_displayable(FederatedErrorCode.NO_PROFILE)

    def test_federated_unknown_is_not_legacy_unknown(self):
        """Codes of the other provider are rejected even when their values match."""
        with pytest.raises(ValueError):
            legacy_error_displayable(FederatedErrorCode.UNKNOWN)

    def test_plain_string_is_rejected(self):
        with pytest.raises(ValueError):
            legacy_error_displayable(LegacyErrorCode.ERROR_NOT_PAID.value)


class TestFederatedErrors:
    """Tests for federated_error_displayable."""

    def test_every_code_has_a_distinct_slot(self):
        slots = [federated_error_displayable(code).slot for code in FederatedErrorCode]
        assert len(slots) == len(set(slots)) == len(FederatedErrorCode)

    def test_unrecognized_code_maps_to_unknown(self):
        """Anything unrecognized falls back to the generic slot."""
        unknown = federated_error_displayable(FederatedErrorCode.UNKNOWN)

        assert federated_error_displayable("no_such_code") == unknown
        assert federated_error_displayable(None) == unknown
        assert federated_error_displayable(LegacyErrorCode.ERROR_NOT_PAID) == unknown
        assert unknown.slot == "federated.unknown"


class TestAuthError:
    """Tests for AuthError."""

    def test_exposes_title_and_description(self):
        displayable = legacy_error_displayable(LegacyErrorCode.ERROR_NOT_PAID)
        error = AuthError(displayable, LegacyErrorCode.ERROR_NOT_PAID)

        assert error.title == displayable.title
        assert error.description == displayable.description
        assert error.code is LegacyErrorCode.ERROR_NOT_PAID
        assert displayable.title in str(error)
