"""Feature and permission checks for the version bound to a session.

Checks for ``can_access(feature, permission)``, in order:
1. No access record (unauthenticated) → denied
2. Feature not in the bound version → denied, whatever the roles
3. No permission asked → granted if any held role has a non-empty entry
4. Otherwise → granted if any held role's entry contains the permission
   or the document's ``permission_all`` wildcard
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .lifecycle import AccessRecord
from .models import PolicyDocument, Role, Version

logger = logging.getLogger(__name__)


class PermissionEvaluator:
    """Read-only queries against one access record.

    Lookups never raise: unknown ids give None or an empty list.

    Example::

        evaluator = PermissionEvaluator(policy, record, roles={"roleA"})
        evaluator.can_access("billing")          # any permission on billing
        evaluator.can_access("billing", "view")  # the view permission
    """

    __slots__ = ("policy", "record", "roles")

    def __init__(
        self,
        policy: PolicyDocument,
        record: Optional[AccessRecord],
        roles: Iterable[str] = (),
    ) -> None:
        self.policy = policy
        self.record = record
        self.roles = frozenset(roles)

    @property
    def version_id(self) -> Optional[str]:
        return self.record.version_id if self.record is not None else None

    # ── Lookups ─────────────────────────────────────────

    def domain_versions(self) -> list[Version]:
        """Versions of the record's domain, in domain order."""
        if self.record is None:
            return []
        domain = self.policy.domains.get(self.record.domain_id)
        if domain is None:
            return []
        return [self.policy.versions[v] for v in domain.versions if v in self.policy.versions]

    def version(self) -> Optional[Version]:
        return self.version_by_id(self.version_id)

    def version_by_id(self, version_id: Optional[str]) -> Optional[Version]:
        if version_id is None:
            return None
        return self.policy.versions.get(version_id)

    def roles_for_version(self) -> list[Role]:
        """Roles assignable in the bound version, sorted by title."""
        return sorted(self._version_roles(), key=lambda r: (r.title, r.id))

    def roles_by_ids(self, role_ids: Iterable[str]) -> list[Role]:
        """Version roles among ``role_ids``, sorted by id."""
        wanted = frozenset(role_ids)
        return sorted((r for r in self._version_roles() if r.id in wanted), key=lambda r: r.id)

    def domain_modules(self) -> frozenset[str]:
        version = self.version()
        return version.modules if version is not None else frozenset()

    def module_is_active(self, module_id: str) -> bool:
        return module_id in self.domain_modules()

    # ── Access checks ───────────────────────────────────

    def can_access(self, feature_id: str, permission_id: Optional[str] = None) -> bool:
        """Check if the held roles grant the feature, and optionally a permission in it."""
        if self.record is None:
            return False

        version = self.version()
        if version is None or feature_id not in version.features:
            return False

        feature_access = self.policy.feature_access(feature_id)

        if permission_id is None:
            return any(feature_access.get(role) for role in self.roles)

        wildcard = self.policy.permission_all
        for role in self.roles:
            granted = feature_access.get(role)
            if not granted:
                continue
            if permission_id in granted:
                return True
            if wildcard is not None and wildcard in granted:
                logger.debug(
                    "Wildcard %s on feature %s grants %s to role %s",
                    wildcard,
                    feature_id,
                    permission_id,
                    role,
                )
                return True
        return False

    def user_feature_permissions(self, feature_id: str, role_ids: Iterable[str]) -> list[str]:
        """Permission ids the given roles hold on a feature, deduplicated and sorted."""
        feature_access = self.policy.feature_access(feature_id)
        granted: set[str] = set()
        for role in frozenset(role_ids):
            granted.update(feature_access.get(role, ()))
        return sorted(granted)

    def _version_roles(self) -> list[Role]:
        version = self.version()
        if version is None:
            return []
        return [self.policy.roles[r] for r in version.roles if r in self.policy.roles]


__all__ = ["PermissionEvaluator"]
