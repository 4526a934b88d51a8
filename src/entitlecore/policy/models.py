"""Typed policy document: domains, versions, roles and the access matrix.

Provides:
- ``Domain``, ``Version``, ``Role`` — frozen records keyed by id.
- ``AppSettings`` — document-wide settings (the ``permission_all`` sentinel).
- ``PolicyDocument`` — the immutable snapshot shared by every session.

The document arrives already decoded (e.g. from JSON) and is turned into
models once with :meth:`PolicyDocument.from_mapping`::

    policy = PolicyDocument.from_mapping({
        "data": {
            "app": {"permission_all": "ALL"},
            "domains": {"acme": {"title": "Acme", "versions": ["v1", "v2"]}},
            "versions": {"v1": {"tag": "basic", "features": ["billing"]}},
            "roles": {"roleA": {"title": "Clerk"}},
            "access": {"billing": {"roleA": ["view"]}},
        }
    })
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..exceptions import ConfigurationError

_FROZEN = {"frozen": True, "extra": "ignore"}
_EMPTY: Mapping[str, frozenset[str]] = MappingProxyType({})


class Role(BaseModel):
    """Assignable role."""

    model_config = _FROZEN

    id: str
    title: str = ""


class Version(BaseModel):
    """A bundle of features, modules and assignable roles."""

    model_config = _FROZEN

    id: str
    tag: str = ""
    title: str = ""
    features: frozenset[str] = frozenset()
    modules: frozenset[str] = frozenset()
    roles: frozenset[str] = frozenset()


class Domain(BaseModel):
    """Tenant scope owning an ordered list of versions.

    ``versions[0]`` is the default version for new access records.
    """

    model_config = _FROZEN

    id: str
    title: str = ""
    versions: tuple[str, ...] = ()
    network: frozenset[str] = frozenset()
    signup: bool = False


class AppSettings(BaseModel):
    """Document-wide settings."""

    model_config = _FROZEN

    permission_all: Optional[str] = Field(
        default=None,
        description="Wildcard permission id. A role granted it on a feature holds every permission.",
    )


class PolicyDocument(BaseModel):
    """Immutable policy snapshot.

    ``access[feature_id][role_id]`` is the set of permission ids the role
    holds on the feature.
    """

    model_config = {"frozen": True}

    domains: Mapping[str, Domain] = Field(default_factory=dict)
    versions: Mapping[str, Version] = Field(default_factory=dict)
    roles: Mapping[str, Role] = Field(default_factory=dict)
    access: Mapping[str, Mapping[str, frozenset[str]]] = Field(default_factory=dict)
    app: AppSettings = Field(default_factory=AppSettings)

    @model_validator(mode="after")
    def _read_only_sections(self) -> PolicyDocument:
        """Expose every section as a read-only mapping."""
        object.__setattr__(self, "domains", MappingProxyType(dict(self.domains)))
        object.__setattr__(self, "versions", MappingProxyType(dict(self.versions)))
        object.__setattr__(self, "roles", MappingProxyType(dict(self.roles)))
        object.__setattr__(
            self,
            "access",
            MappingProxyType({feature: MappingProxyType(dict(grants)) for feature, grants in self.access.items()}),
        )
        return self

    @property
    def permission_all(self) -> Optional[str]:
        return self.app.permission_all

    def feature_access(self, feature_id: str) -> Mapping[str, frozenset[str]]:
        """Role → permissions mapping for a feature (empty if undeclared)."""
        return self.access.get(feature_id, _EMPTY)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> PolicyDocument:
        """Build a snapshot from a decoded document.

        Accepts either the bare sections or a ``{"data": {...}}`` envelope.
        Mapping keys become record ids.

        Raises:
            ConfigurationError: A section or record has the wrong shape.
        """
        if not isinstance(raw, Mapping):
            raise ConfigurationError("Policy document must be a mapping", got=type(raw).__name__)

        data = raw.get("data", raw)
        if not isinstance(data, Mapping):
            raise ConfigurationError("Policy 'data' section must be a mapping", got=type(data).__name__)

        try:
            return cls.model_validate(
                {
                    "domains": _keyed("domains", data.get("domains")),
                    "versions": _keyed("versions", data.get("versions")),
                    "roles": _keyed("roles", data.get("roles")),
                    "access": data.get("access") or {},
                    "app": data.get("app") or {},
                }
            )
        except ValidationError as e:
            raise ConfigurationError(
                f"Malformed policy document: {e.error_count()} invalid field(s)",
                errors=e.errors(include_url=False),
            ) from e


def _keyed(section: str, items: Any) -> dict[str, dict[str, Any]]:
    """Inject each mapping key as the record ``id``."""
    if items is None:
        return {}
    if not isinstance(items, Mapping):
        raise ConfigurationError(f"Policy section '{section}' must be a mapping", section=section)

    out: dict[str, dict[str, Any]] = {}
    for key, value in items.items():
        if not isinstance(value, Mapping):
            raise ConfigurationError(
                f"Policy entry '{section}.{key}' must be a mapping",
                section=section,
                entry=str(key),
            )
        out[str(key)] = {**value, "id": str(key)}
    return out


__all__ = [
    "AppSettings",
    "Domain",
    "PolicyDocument",
    "Role",
    "Version",
]
