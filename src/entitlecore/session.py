"""Access session — one caller's view of the policy.

Provides ``AccessSession``, which wires the components together:

    identity resolution → active domain check → record activation → evaluator

Usage::

    policy = PolicyDocument.from_mapping(decoded_json)
    session = AccessSession(
        policy,
        store,
        domain_id="acme",
        account_id=user.account_id,
        roles=user.roles,
    )
    if session.can_access("billing", "edit"):
        ...
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .config import EntitleConfig
from .logging import get_access_logger
from .policy.evaluator import PermissionEvaluator
from .policy.identity import EffectiveIdentity, ImpersonationOverride, resolve_identity
from .policy.lifecycle import AccessLifecycleManager, AccessPersistence, AccessRecord, Clock, LifecycleDecision
from .policy.models import Domain, PolicyDocument, Role, Version
from .policy.resolver import DomainResolver

logger = logging.getLogger(__name__)


class AccessSession:
    """Resolved identity, bound access record and permission checks for one session.

    Raises on construction:
        ConfigurationError: The effective domain is unknown or has no versions.
        MissingDomainError: An account needs a new record but no domain was given.
        PersistenceError: The persistence port failed to load or create the record.
    """

    def __init__(
        self,
        policy: PolicyDocument,
        persistence: AccessPersistence,
        *,
        domain_id: Optional[str] = None,
        account_id: Optional[str | int] = None,
        roles: Optional[Iterable[str]] = None,
        override: Optional[ImpersonationOverride] = None,
        config: Optional[EntitleConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.config = config or EntitleConfig()
        self.policy = policy
        self.resolver = DomainResolver(policy)

        if override is not None and not override.is_empty:
            if self.config.allow_impersonation:
                logger.warning("Impersonation override applied to %s", ", ".join(override.fields()))
            else:
                logger.warning("Impersonation override ignored (allow_impersonation is off)")
                override = None

        self.identity: EffectiveIdentity = resolve_identity(domain_id, account_id, roles, override)
        self._log = get_access_logger(
            __name__,
            account_id=self.identity.account_id,
            domain_id=self.identity.domain_id,
        )

        if self.identity.domain_id:
            self.resolver.require_active_domain(self.identity.domain_id)

        self.lifecycle = AccessLifecycleManager(self.resolver, persistence, clock=clock)
        self.lifecycle.activate(self.identity)
        self.evaluator = PermissionEvaluator(policy, self.lifecycle.record, self.identity.roles)

        self._log.debug("Session bound to version %s", self.evaluator.version_id)

    @property
    def access_record(self) -> Optional[AccessRecord]:
        return self.lifecycle.record

    @property
    def version_id(self) -> Optional[str]:
        return self.evaluator.version_id

    def update_access_record(self, new_values: AccessRecord) -> LifecycleDecision:
        """Persist a change to the access record and rebind the evaluator."""
        decision = self.lifecycle.update_access_record(new_values)
        self.evaluator = PermissionEvaluator(self.policy, self.lifecycle.record, self.identity.roles)
        return decision

    # ── Domain ──────────────────────────────────────────

    def domain(self) -> Optional[Domain]:
        return self.resolver.domain(self.identity.domain_id)

    def default_version_id(self, domain_id: Optional[str] = None) -> str:
        return self.resolver.default_version_id(domain_id or self.identity.domain_id)

    def domain_network(self) -> dict[str, dict[str, str]]:
        return self.resolver.domain_network(self.identity.domain_id)

    def signup_domains(self) -> dict[str, Domain]:
        return self.resolver.signup_domains()

    def tagged_versions(self, tags: str | Iterable[str], sort_key: str = "tag") -> list[Version]:
        return self.resolver.tagged_versions(tags, sort_key)

    # ── Version & roles ─────────────────────────────────

    def domain_versions(self) -> list[Version]:
        return self.resolver.versions_for_domain(self.identity.domain_id)

    def version(self) -> Optional[Version]:
        return self.evaluator.version()

    def version_by_id(self, version_id: str) -> Optional[Version]:
        return self.evaluator.version_by_id(version_id)

    def roles_for_version(self) -> list[Role]:
        return self.evaluator.roles_for_version()

    def roles_by_ids(self, role_ids: Iterable[str]) -> list[Role]:
        return self.evaluator.roles_by_ids(role_ids)

    def domain_modules(self) -> frozenset[str]:
        return self.evaluator.domain_modules()

    def module_is_active(self, module_id: str) -> bool:
        return self.evaluator.module_is_active(module_id)

    # ── Access ──────────────────────────────────────────

    def can_access(self, feature_id: str, permission_id: Optional[str] = None) -> bool:
        return self.evaluator.can_access(feature_id, permission_id)

    def user_feature_permissions(self, feature_id: str, role_ids: Iterable[str]) -> list[str]:
        return self.evaluator.user_feature_permissions(feature_id, role_ids)


__all__ = ["AccessSession"]
