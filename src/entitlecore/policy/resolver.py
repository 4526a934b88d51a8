"""Domain and version lookups over a policy snapshot."""

from __future__ import annotations

import fnmatch
import logging
from typing import Iterable

from ..exceptions import ConfigurationError
from .models import Domain, PolicyDocument, Version

logger = logging.getLogger(__name__)

# Version fields tagged_versions() can sort by.
SORTABLE_VERSION_FIELDS = ("id", "tag", "title")


class DomainResolver:
    """Answers domain-scoped questions about a :class:`PolicyDocument`.

    Lookups used for display degrade to empty results. Only
    :meth:`default_version_id` and :meth:`require_active_domain` raise,
    since a session cannot proceed without a default version.
    """

    __slots__ = ("policy",)

    def __init__(self, policy: PolicyDocument) -> None:
        self.policy = policy

    def domain(self, domain_id: str | None) -> Domain | None:
        if not domain_id:
            return None
        return self.policy.domains.get(domain_id)

    def require_active_domain(self, domain_id: str) -> Domain:
        """Return the domain, enforcing that it exists and owns a version.

        Raises:
            ConfigurationError: Unknown domain, or a domain with no versions.
        """
        domain = self.domain(domain_id)
        if domain is None:
            raise ConfigurationError(f'Domain "{domain_id}" is not defined', domain_id=domain_id)
        if not domain.versions:
            raise ConfigurationError(
                f'There are no versions assigned to domain "{domain_id}"',
                domain_id=domain_id,
            )
        return domain

    def default_version_id(self, domain_id: str) -> str:
        """First version of the domain (index 0 is the default)."""
        return self.require_active_domain(domain_id).versions[0]

    def versions_for_domain(self, domain_id: str | None) -> list[Version]:
        """Ordered version records of a domain. Dangling ids are skipped."""
        domain = self.domain(domain_id)
        if domain is None:
            return []

        versions = []
        for version_id in domain.versions:
            version = self.policy.versions.get(version_id)
            if version is None:
                logger.debug("Domain %s references unknown version %s", domain_id, version_id)
                continue
            versions.append(version)
        return versions

    def signup_domains(self) -> dict[str, Domain]:
        return {domain_id: d for domain_id, d in self.policy.domains.items() if d.signup}

    def domain_network(self, domain_id: str | None) -> dict[str, dict[str, str]]:
        """Sibling domains as ``{id: {"id": ..., "title": ...}}``."""
        domain = self.domain(domain_id)
        if domain is None:
            return {}

        network: dict[str, dict[str, str]] = {}
        for sibling_id in sorted(domain.network):
            sibling = self.policy.domains.get(sibling_id)
            if sibling is None:
                logger.debug("Domain %s lists unknown network domain %s", domain_id, sibling_id)
                continue
            network[sibling_id] = {"id": sibling_id, "title": sibling.title}
        return network

    def tagged_versions(self, tags: str | Iterable[str], sort_key: str = "tag") -> list[Version]:
        """Versions whose tag matches ``tags``, sorted by ``sort_key``.

        A collection of strings is an exact membership test; a single string
        is a shell-style wildcard pattern (``"pro-*"``).

        Kept for documents written before domains existed; access decisions
        never go through it.
        """
        if sort_key not in SORTABLE_VERSION_FIELDS:
            raise ValueError(f"Cannot sort versions by {sort_key!r}. Must be one of {SORTABLE_VERSION_FIELDS}")

        if isinstance(tags, str):
            matched = [v for v in self.policy.versions.values() if fnmatch.fnmatchcase(v.tag, tags)]
        else:
            wanted = frozenset(tags)
            matched = [v for v in self.policy.versions.values() if v.tag in wanted]

        return sorted(matched, key=lambda v: getattr(v, sort_key))


__all__ = [
    "SORTABLE_VERSION_FIELDS",
    "DomainResolver",
]
