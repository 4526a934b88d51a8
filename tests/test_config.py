"""Tests for EntitleConfig."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from entitlecore import EntitleConfig, LogLevel, load_config_from_env


class TestEntitleConfig:
    """Tests for EntitleConfig model."""

    def test_create_default_config(self) -> None:
        config = EntitleConfig()
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False
        assert config.service_name is None
        assert config.allow_impersonation is True

    def test_log_level_from_string(self) -> None:
        """Log level strings are case-insensitive."""
        assert EntitleConfig(log_level="debug").log_level == LogLevel.DEBUG

    def test_log_level_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            EntitleConfig(log_level="INVALID")

    def test_log_level_wrong_type(self) -> None:
        with pytest.raises(ValueError, match="must be string"):
            EntitleConfig(log_level=10)

    def test_extra_fields_forbidden(self) -> None:
        with pytest.raises(ValueError):
            EntitleConfig(redis_url="redis://localhost")  # type: ignore[call-arg]


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env."""

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = load_config_from_env()
        assert config.log_level == LogLevel.INFO
        assert config.allow_impersonation is True

    def test_values_from_env(self) -> None:
        env = {
            "LOG_LEVEL": "WARNING",
            "LOG_JSON": "yes",
            "SERVICE_NAME": "billing-api",
            "ENTITLE_ALLOW_IMPERSONATION": "false",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config_from_env()
        assert config.log_level == LogLevel.WARNING
        assert config.log_json is True
        assert config.service_name == "billing-api"
        assert config.allow_impersonation is False
