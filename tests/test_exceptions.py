"""Tests for the exception hierarchy and error registry."""

from __future__ import annotations

import pytest
from entitlecore import (
    ConfigurationError,
    EntitleCoreError,
    MissingDomainError,
    PersistenceError,
    error_registry,
    register_error,
)


class TestExceptionHierarchy:
    """All errors share the coded base class."""

    @pytest.mark.parametrize(
        ("error_cls", "code"),
        [
            (ConfigurationError, "CONFIGURATION_ERROR"),
            (MissingDomainError, "MISSING_DOMAIN"),
            (PersistenceError, "PERSISTENCE_ERROR"),
        ],
    )
    def test_codes(self, error_cls, code) -> None:
        error = error_cls()
        assert isinstance(error, EntitleCoreError)
        assert error.code == code
        assert error.message
        assert str(error) == error.message

    def test_details_and_message(self) -> None:
        error = PersistenceError("Failed to create access record.", account_id="42")
        assert error.message == "Failed to create access record."
        assert error.details == {"account_id": "42"}


class TestErrorRegistry:
    """Tests for the code → class registry."""

    def test_base_errors_registered(self) -> None:
        assert error_registry.get("MISSING_DOMAIN") is MissingDomainError
        assert error_registry.get("PERSISTENCE_ERROR") is PersistenceError
        assert error_registry.get("NOPE") is None

    def test_register_custom_error(self) -> None:
        @register_error("QUOTA_EXCEEDED")
        class QuotaExceededError(EntitleCoreError):
            code = "QUOTA_EXCEEDED"

        assert error_registry.get("QUOTA_EXCEEDED") is QuotaExceededError
        assert "QUOTA_EXCEEDED" in error_registry.all()
