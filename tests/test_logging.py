"""Tests for entitlecore.logging module."""

from __future__ import annotations

import json
import logging

import pytest
from entitlecore import (
    AccessLogFormatter,
    EntitleConfig,
    LogLevel,
    get_access_logger,
    safe_preview,
    setup_logging,
)


def _record(msg: str = "Test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestSafePreview:
    """Tests for safe_preview function."""

    def test_none_value(self) -> None:
        assert safe_preview(None) == ""

    def test_whitespace_normalized(self) -> None:
        assert safe_preview("hello\n\tworld  test") == "hello world test"

    def test_truncation(self) -> None:
        result = safe_preview("a" * 300, limit=100)
        assert len(result) == 100
        assert result.endswith("…")

    def test_sets_are_sorted(self) -> None:
        assert safe_preview(frozenset({"roleB", "roleA"})) == '["roleA", "roleB"]'


class TestAccessLogFormatter:
    """Tests for AccessLogFormatter."""

    def test_json_format(self) -> None:
        record = _record()
        record.account_id = "42"
        record.domain_id = "acme"
        record.version_id = "v1"

        data = json.loads(AccessLogFormatter(json_format=True).format(record))
        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["account_id"] == "42"
        assert data["domain_id"] == "acme"
        assert data["version_id"] == "v1"

    def test_plain_format(self) -> None:
        record = _record()
        record.account_id = "42"

        result = AccessLogFormatter(json_format=False).format(record)
        assert "INFO" in result
        assert "account_id=42" in result
        assert "Test message" in result
        assert not result.startswith("{")

    def test_context_excluded(self) -> None:
        record = _record()
        record.account_id = "42"
        data = json.loads(AccessLogFormatter(include_context=False).format(record))
        assert "account_id" not in data


class TestAccessLoggerAdapter:
    """Tests for get_access_logger."""

    def test_context_added(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_access_logger("test", account_id="42", domain_id="acme")
        with caplog.at_level(logging.INFO):
            logger.info("Access record created")
        record = caplog.records[0]
        assert record.account_id == "42"
        assert record.domain_id == "acme"

    def test_per_call_override(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_access_logger("test", account_id="42")
        with caplog.at_level(logging.INFO):
            logger.info("Switched", account_id="7")
        assert caplog.records[0].account_id == "7"
        assert not hasattr(caplog.records[0], "domain_id")

    def test_lifecycle_logs_creation(self, policy, store, caplog: pytest.LogCaptureFixture) -> None:
        from entitlecore import AccessSession

        with caplog.at_level(logging.INFO, logger="entitlecore.policy.lifecycle"):
            AccessSession(policy, store, domain_id="acme", account_id="42", roles=["roleA"])
        created = [r for r in caplog.records if "created" in r.getMessage()]
        assert created
        assert created[0].account_id == "42"
        assert created[0].domain_id == "acme"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_from_config(self, restore_root_logger) -> None:
        setup_logging(EntitleConfig(log_level=LogLevel.DEBUG), json_format=False)
        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1

    def test_json_from_config(self, restore_root_logger) -> None:
        setup_logging(EntitleConfig(log_json=True))
        formatter = restore_root_logger.handlers[0].formatter
        assert isinstance(formatter, AccessLogFormatter)
        assert formatter.json_format is True

    def test_service_logger_level(self, restore_root_logger) -> None:
        setup_logging(EntitleConfig(log_level="WARNING", service_name="billing-api"))
        assert logging.getLogger("billing-api").level == logging.WARNING
