from .config import EntitleConfig, LogLevel, load_config_from_env
from .exceptions import (
    ConfigurationError,
    EntitleCoreError,
    ErrorRegistry,
    MissingDomainError,
    PersistenceError,
    error_registry,
    register_error,
)
from .logging import (
    AccessLogFormatter,
    AccessLoggerAdapter,
    get_access_logger,
    safe_preview,
    setup_logging,
)
from .policy import (
    AccessLifecycleManager,
    AccessPersistence,
    AccessRecord,
    AppSettings,
    Domain,
    DomainResolver,
    EffectiveIdentity,
    ImpersonationOverride,
    InMemoryAccessStore,
    LifecycleAction,
    LifecycleDecision,
    PermissionEvaluator,
    PolicyDocument,
    Role,
    Version,
    decide_activation,
    decide_update,
    resolve_identity,
)
from .session import AccessSession

__all__ = [
    'AccessSession',
    'PolicyDocument',
    'Domain',
    'Version',
    'Role',
    'AppSettings',
    'EffectiveIdentity',
    'ImpersonationOverride',
    'resolve_identity',
    'DomainResolver',
    'AccessRecord',
    'AccessPersistence',
    'AccessLifecycleManager',
    'LifecycleAction',
    'LifecycleDecision',
    'decide_activation',
    'decide_update',
    'PermissionEvaluator',
    'InMemoryAccessStore',
    'EntitleConfig',
    'LogLevel',
    'load_config_from_env',
    'EntitleCoreError',
    'ConfigurationError',
    'MissingDomainError',
    'PersistenceError',
    'ErrorRegistry',
    'error_registry',
    'register_error',
    'AccessLogFormatter',
    'AccessLoggerAdapter',
    'get_access_logger',
    'safe_preview',
    'setup_logging',
]
