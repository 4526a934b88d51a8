"""Policy resolution and permission evaluation.

Defines:
- PolicyDocument: typed snapshot of domains, versions, roles and the access matrix
- resolve_identity(): caller identity merged with an impersonation override
- DomainResolver: default version, network, signup and tagged-version lookups
- AccessLifecycleManager: Reuse / Create / Update decisions for access records
- PermissionEvaluator: feature and permission checks for a bound version
- InMemoryAccessStore: reference persistence port
"""

from .evaluator import PermissionEvaluator
from .identity import EffectiveIdentity, ImpersonationOverride, resolve_identity
from .lifecycle import (
    AccessLifecycleManager,
    AccessPersistence,
    AccessRecord,
    LifecycleAction,
    LifecycleDecision,
    decide_activation,
    decide_update,
)
from .models import AppSettings, Domain, PolicyDocument, Role, Version
from .resolver import DomainResolver
from .store import InMemoryAccessStore

__all__ = [
    "AccessLifecycleManager",
    "AccessPersistence",
    "AccessRecord",
    "AppSettings",
    "Domain",
    "DomainResolver",
    "EffectiveIdentity",
    "ImpersonationOverride",
    "InMemoryAccessStore",
    "LifecycleAction",
    "LifecycleDecision",
    "PermissionEvaluator",
    "PolicyDocument",
    "Role",
    "Version",
    "decide_activation",
    "decide_update",
    "resolve_identity",
]
