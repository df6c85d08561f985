"""Authentication platform.

Session lifecycle management against a remote identity provider:

- core: entities, value objects, events, exceptions and protocols
- application: retry policy, state store, refresh scheduler, SessionManager
- infrastructure: Keycloak adapter, system clock, local caches, factories
"""

from .core import (
    AuthChangeEvent,
    AuthState,
    AuthStateListener,
    AuthStatus,
    AuthSubscription,
    Clock,
    Credentials,
    ErrorKind,
    IdentityProvider,
    LivenessRevoked,
    LocalCache,
    PermanentSessionError,
    Principal,
    Session,
    SessionError,
    SessionValidationError,
    SignUpOptions,
    TransientSessionError,
)
from .application import (
    AuthStateStore,
    ErrorClassifier,
    LivenessToken,
    RefreshScheduler,
    RetryExecutor,
    RetryPolicy,
    ScheduleHandle,
    SessionManager,
)
from .infrastructure import (
    KeycloakClientFactory,
    KeycloakIdentityAdapter,
    MemoryLocalCache,
    SystemClock,
    create_keycloak_provider,
    create_session_manager,
)

__all__ = [
    # Core
    "AuthChangeEvent",
    "AuthState",
    "AuthStateListener",
    "AuthStatus",
    "AuthSubscription",
    "Clock",
    "Credentials",
    "ErrorKind",
    "IdentityProvider",
    "LivenessRevoked",
    "LocalCache",
    "PermanentSessionError",
    "Principal",
    "Session",
    "SessionError",
    "SessionValidationError",
    "SignUpOptions",
    "TransientSessionError",
    # Application
    "AuthStateStore",
    "ErrorClassifier",
    "LivenessToken",
    "RefreshScheduler",
    "RetryExecutor",
    "RetryPolicy",
    "ScheduleHandle",
    "SessionManager",
    # Infrastructure
    "KeycloakClientFactory",
    "KeycloakIdentityAdapter",
    "MemoryLocalCache",
    "SystemClock",
    "create_keycloak_provider",
    "create_session_manager",
]
