"""Effective session identity and the impersonation override.

The identity handed to the rest of the core is the caller's identity with
any override fields substituted in. Nothing here is checked against the
policy document; unknown ids are caught by the resolver and lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class EffectiveIdentity:
    """Who the session acts as.

    - domain_id: Active domain (None = no domain supplied)
    - account_id: Authenticated account (None = not yet authenticated)
    - roles: Role ids held by the account
    """

    domain_id: str | None = None
    account_id: str | None = None
    roles: frozenset[str] = frozenset()

    @property
    def is_authenticated(self) -> bool:
        return self.account_id is not None


@dataclass(frozen=True)
class ImpersonationOverride:
    """Debugging override. Each field set here replaces the caller's value."""

    domain_id: str | None = None
    account_id: str | None = None
    roles: frozenset[str] | None = None

    @property
    def is_empty(self) -> bool:
        return self.domain_id is None and self.account_id is None and self.roles is None

    def fields(self) -> tuple[str, ...]:
        """Names of the fields this override replaces."""
        return tuple(name for name in ("domain_id", "account_id", "roles") if getattr(self, name) is not None)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> ImpersonationOverride:
        """Build from a decoded override document.

        Recognised keys: ``domain``, ``account`` and ``role`` / ``roles``. A
        single role string counts as a one-element role set.
        """
        if not raw:
            return cls()

        roles = raw.get("roles", raw.get("role"))
        account = raw.get("account")
        return cls(
            domain_id=raw.get("domain"),
            account_id=None if account is None else str(account),
            roles=None if roles is None else _role_set(roles),
        )


def _role_set(roles: str | Iterable[str]) -> frozenset[str]:
    if isinstance(roles, str):
        return frozenset({roles})
    return frozenset(roles)


def resolve_identity(
    domain_id: str | None,
    account_id: str | int | None,
    roles: Iterable[str] | None,
    override: ImpersonationOverride | None = None,
) -> EffectiveIdentity:
    """Merge caller identity with an optional override.

    Example::

        resolve_identity("acme", "42", ["clerk"], ImpersonationOverride(roles=frozenset({"admin"})))
        # EffectiveIdentity(domain_id="acme", account_id="42", roles=frozenset({"admin"}))
    """
    caller_roles = frozenset(roles or ())
    if account_id is not None:
        account_id = str(account_id)
    if override is None:
        return EffectiveIdentity(domain_id=domain_id, account_id=account_id, roles=caller_roles)

    return EffectiveIdentity(
        domain_id=override.domain_id if override.domain_id is not None else domain_id,
        account_id=override.account_id if override.account_id is not None else account_id,
        roles=override.roles if override.roles is not None else caller_roles,
    )


__all__ = [
    "EffectiveIdentity",
    "ImpersonationOverride",
    "resolve_identity",
]
