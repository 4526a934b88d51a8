"""Logging utilities for entitlecore.

This module provides:
- Logging configuration from EntitleConfig
- Safe, length-bounded previews of logged values
- Structured logging with account/domain context
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .config import EntitleConfig, LogLevel

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "account_id", "domain_id",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Converts any value to a single-line string, normalizes whitespace and
    truncates to ``limit`` characters.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated single-line string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list, tuple, set, frozenset)):
        try:
            s = json.dumps(
                sorted(value) if isinstance(value, (set, frozenset)) else value,
                default=str,
                ensure_ascii=False,
            )
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


class AccessLogFormatter(logging.Formatter):
    """Formatter that includes account/domain context and optional JSON output."""

    def __init__(
        self,
        include_context: bool = True,
        json_format: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_context = include_context
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        account_id = getattr(record, "account_id", None)
        domain_id = getattr(record, "domain_id", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            if account_id is not None:
                log_data["account_id"] = str(account_id)
            if domain_id:
                log_data["domain_id"] = domain_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_preview(value)

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if "account_id" in log_data:
            parts.append(f"account_id={log_data['account_id']}")
        if "domain_id" in log_data:
            parts.append(f"domain_id={log_data['domain_id']}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class AccessLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds account_id and domain_id to log records.

    Usage:
        logger = get_access_logger(__name__, account_id="42", domain_id="acme")
        logger.info("Access record created")
    """

    def __init__(
        self,
        logger: logging.Logger,
        account_id: Optional[str] = None,
        domain_id: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.account_id = account_id
        self.domain_id = domain_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        account_id = kwargs.pop("account_id", self.account_id)
        domain_id = kwargs.pop("domain_id", self.domain_id)

        extra = kwargs.get("extra") or {}
        if account_id is not None:
            extra["account_id"] = account_id
        if domain_id:
            extra["domain_id"] = domain_id
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[EntitleConfig] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure the root logger for a hosting application.

    Args:
        config: EntitleConfig instance (if None, loads from environment)
        json_format: Force JSON (True) or plain text (False). Defaults to ``config.log_json``.
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(LogLevel(config.log_level), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        AccessLogFormatter(
            include_context=True,
            json_format=config.log_json if json_format is None else json_format,
        )
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_access_logger(
    name: str,
    account_id: Optional[str] = None,
    domain_id: Optional[str] = None,
) -> AccessLoggerAdapter:
    """Get a logger adapter bound to an account and domain.

    Example:
        logger = get_access_logger(__name__, account_id=identity.account_id)
        logger.info("Version changed", extra={"version_id": "pro"})
    """
    return AccessLoggerAdapter(logging.getLogger(name), account_id=account_id, domain_id=domain_id)


__all__ = [
    "AccessLogFormatter",
    "AccessLoggerAdapter",
    "get_access_logger",
    "safe_preview",
    "setup_logging",
]
