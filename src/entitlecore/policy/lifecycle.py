"""Access record lifecycle: first activation, domain transfer, version change.

Provides:
- ``AccessRecord`` — binding of an account to a domain, version and activation time.
- ``AccessPersistence`` — the storage port implemented by hosting applications.
- ``LifecycleAction`` / ``LifecycleDecision`` — the Reuse | Create | Update variant.
- ``decide_activation()`` / ``decide_update()`` — pure decision functions.
- ``AccessLifecycleManager`` — applies decisions through the port.

A version change never patches the current record: it creates a new one
with a fresh ``activated_at``, so every version an account held has its own
record. Updates in place only happen while the version stays the same.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from ..exceptions import EntitleCoreError, MissingDomainError, PersistenceError
from ..logging import get_access_logger
from .identity import EffectiveIdentity
from .resolver import DomainResolver

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AccessRecord(BaseModel):
    """Durable binding of an account to a domain and version.

    Frozen: changes go through ``model_copy(update=...)`` so a record handed
    out by the store or a session never changes under its holder.
    """

    model_config = {"frozen": True}

    account_id: str
    domain_id: str
    version_id: str
    activated_at: datetime = Field(default_factory=utc_now)


class AccessPersistence(ABC):
    """Storage port for access records.

    ``create_access_record`` and ``update_access_record`` return a truthy
    value on success. A falsy result (or an exception) is reported to the
    caller as :class:`PersistenceError`; the core never retries.
    """

    @abstractmethod
    def load_current_access_record(self, account_id: str) -> Optional[AccessRecord]:
        raise NotImplementedError

    @abstractmethod
    def create_access_record(self, record: AccessRecord) -> bool:
        raise NotImplementedError

    @abstractmethod
    def update_access_record(self, record: AccessRecord) -> bool:
        raise NotImplementedError


class LifecycleAction(str, Enum):
    REUSE = "reuse"
    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True)
class LifecycleDecision:
    """What to do with ``record``: keep it, create it, or update it in place."""

    action: LifecycleAction
    record: AccessRecord


def decide_activation(
    identity: EffectiveIdentity,
    existing: Optional[AccessRecord],
    resolver: DomainResolver,
    now: datetime,
) -> Optional[LifecycleDecision]:
    """Decide how a session binds to an access record.

    Returns None for an unauthenticated identity (no record operations).
    Returns REUSE when the existing record belongs to the effective domain,
    CREATE (with the domain's default version) for a new account or a
    domain transfer.

    Raises:
        MissingDomainError: A record must be created but no domain is set.
        ConfigurationError: The domain is unknown or has no versions.
    """
    if not identity.is_authenticated:
        return None

    if existing is not None and existing.domain_id == identity.domain_id:
        return LifecycleDecision(LifecycleAction.REUSE, existing)

    if not identity.domain_id:
        raise MissingDomainError(
            "A domain id is required to create a new access record.",
            account_id=identity.account_id,
        )

    record = AccessRecord(
        account_id=identity.account_id,
        domain_id=identity.domain_id,
        version_id=resolver.default_version_id(identity.domain_id),
        activated_at=now,
    )
    return LifecycleDecision(LifecycleAction.CREATE, record)


def decide_update(
    current: Optional[AccessRecord],
    new_values: AccessRecord,
    now: datetime,
) -> LifecycleDecision:
    """Decide how an explicit change to the access record is persisted.

    A different version (or no current record) is a CREATE stamped with
    ``now``; the same version is an in-place UPDATE that keeps the current
    activation time.

    ``new_values`` must belong to the current record's account, and an
    in-place UPDATE cannot move the record to another domain.

    Raises:
        MissingDomainError: A record must be created but ``new_values`` has no domain.
        PersistenceError: ``new_values`` targets another account, or changes the
            domain without changing the version.
    """
    if current is not None and new_values.account_id != current.account_id:
        raise PersistenceError(
            "Access record belongs to another account.",
            account_id=current.account_id,
            requested_account_id=new_values.account_id,
        )

    if current is None or new_values.version_id != current.version_id:
        if not new_values.domain_id:
            raise MissingDomainError(
                "A domain id is required to create a new access record.",
                account_id=new_values.account_id,
            )
        return LifecycleDecision(
            LifecycleAction.CREATE,
            new_values.model_copy(update={"activated_at": now}),
        )

    if new_values.domain_id != current.domain_id:
        raise PersistenceError(
            "An in-place update cannot change the domain of an access record.",
            account_id=current.account_id,
            domain_id=current.domain_id,
            requested_domain_id=new_values.domain_id,
        )

    return LifecycleDecision(
        LifecycleAction.UPDATE,
        new_values.model_copy(update={"activated_at": current.activated_at}),
    )


class AccessLifecycleManager:
    """Owns the session's access record and drives the persistence port."""

    def __init__(
        self,
        resolver: DomainResolver,
        persistence: AccessPersistence,
        *,
        clock: Clock | None = None,
    ) -> None:
        if not isinstance(persistence, AccessPersistence):
            raise TypeError(f"Persistence must implement AccessPersistence, got {type(persistence).__name__}")
        self.resolver = resolver
        self.persistence = persistence
        self._clock = clock or utc_now
        self.record: Optional[AccessRecord] = None

    def activate(self, identity: EffectiveIdentity) -> Optional[AccessRecord]:
        """Load the account's record and create one if needed.

        Returns the bound record, or None for an unauthenticated identity.
        """
        log = get_access_logger(__name__, account_id=identity.account_id, domain_id=identity.domain_id)
        if not identity.is_authenticated:
            log.debug("No account id; session stays unauthenticated")
            return None

        existing = self._call(self.persistence.load_current_access_record, identity.account_id, "load")
        decision = decide_activation(identity, existing, self.resolver, self._clock())
        if decision is not None:
            self.apply(decision)
        return self.record

    def update_access_record(self, new_values: AccessRecord) -> LifecycleDecision:
        """Persist an explicit change (typically a version change)."""
        decision = decide_update(self.record, new_values, self._clock())
        self.apply(decision)
        return decision

    def apply(self, decision: LifecycleDecision) -> AccessRecord:
        record = decision.record
        log = get_access_logger(__name__, account_id=record.account_id, domain_id=record.domain_id)

        if decision.action is LifecycleAction.CREATE:
            if not self._call(self.persistence.create_access_record, record, "create"):
                raise PersistenceError("Failed to create access record.", account_id=record.account_id)
            log.info("Access record created for version %s", record.version_id)
        elif decision.action is LifecycleAction.UPDATE:
            if not self._call(self.persistence.update_access_record, record, "update"):
                raise PersistenceError("Failed to update access record.", account_id=record.account_id)
            log.info("Access record updated for version %s", record.version_id)
        else:
            log.debug("Reusing access record for version %s", record.version_id)

        self.record = record
        return record

    @staticmethod
    def _call(operation: Callable[[Any], Any], arg: Any, verb: str) -> Any:
        try:
            return operation(arg)
        except EntitleCoreError:
            raise
        except Exception as e:
            raise PersistenceError(f"Access record {verb} failed: {e}", operation=verb) from e


__all__ = [
    "AccessLifecycleManager",
    "AccessPersistence",
    "AccessRecord",
    "LifecycleAction",
    "LifecycleDecision",
    "decide_activation",
    "decide_update",
    "utc_now",
]
