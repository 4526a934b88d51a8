"""Configuration contract for entitlecore.

Pydantic-validated settings for hosting applications embedding the core.
Direct os.environ/os.getenv usage is limited to load_config_from_env().
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EntitleConfig(BaseModel):
    """Settings shared by every access session of a hosting application."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the core",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used as the application logger name",
    )

    # Identity
    allow_impersonation: bool = Field(
        default=True,
        description="Apply impersonation overrides. Disabled = overrides are ignored.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def load_config_from_env() -> EntitleConfig:
    """Load configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name for the application logger
    - ENTITLE_ALLOW_IMPERSONATION: Apply impersonation overrides (default: true)

    Returns:
        EntitleConfig instance with values from environment or defaults.
    """
    import os

    _TRUTHY = ("true", "1", "yes", "on")

    return EntitleConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
        service_name=os.getenv("SERVICE_NAME"),
        allow_impersonation=os.getenv("ENTITLE_ALLOW_IMPERSONATION", "true").lower() in _TRUTHY,
    )


__all__ = [
    "EntitleConfig",
    "LogLevel",
    "load_config_from_env",
]
