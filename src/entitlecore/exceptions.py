"""Unified exception hierarchy for entitlecore.

All errors raised by the core inherit from EntitleCoreError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for mapping codes back to classes in hosting layers

Usage:
    from entitlecore.exceptions import (
        EntitleCoreError,
        ConfigurationError,
        MissingDomainError,
        PersistenceError,
    )

Hosting applications may define thin subclasses and register them:
    @register_error("BILLING_SYNC_ERROR")
    class BillingSyncError(EntitleCoreError):
        code = "BILLING_SYNC_ERROR"
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "EntitleCoreError",
    "ConfigurationError",
    "MissingDomainError",
    "PersistenceError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
]


# ---- Exception Hierarchy ----------------------------------------------------


class EntitleCoreError(Exception):
    """Base exception for entitlecore.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "MISSING_DOMAIN").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(EntitleCoreError):
    """Policy document is structurally invalid or misses a required entry."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Invalid policy configuration"


class MissingDomainError(EntitleCoreError):
    """A new access record was requested without a domain."""

    code: str = "MISSING_DOMAIN"
    message: str = "A domain id is required to create a new access record"


class PersistenceError(EntitleCoreError):
    """The persistence port rejected a create or update."""

    code: str = "PERSISTENCE_ERROR"
    message: str = "Failed to persist access record"


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[EntitleCoreError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[EntitleCoreError]] = {}

    def register(self, code: str, error_cls: type[EntitleCoreError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[EntitleCoreError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[EntitleCoreError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("MY_CUSTOM_ERROR")
        class MyCustomError(EntitleCoreError):
            code = "MY_CUSTOM_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", EntitleCoreError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("MISSING_DOMAIN", MissingDomainError)
error_registry.register("PERSISTENCE_ERROR", PersistenceError)
