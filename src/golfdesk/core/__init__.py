"""Core services and utilities for golfdesk."""

from .context import (
    RequestContext,
    create_context,
    get_current_context,
    get_current_context_or_none,
    request_context,
    reset_context,
    set_context,
)
from .exceptions import (
    AuthenticationError,
    ConflictError,
    ContextNotSetError,
    FieldValidationError,
    ResourceNotFoundError,
    TenantValidationCode,
    TenantValidationError,
)
from .session import (
    ChainedSessionVerifier,
    DevSessionVerifier,
    SessionClaim,
    SessionVerifier,
    SignedSessionVerifier,
)
from .tenant import TenantResolver, TenantService

__all__ = [
    # Context
    "RequestContext",
    "create_context",
    "get_current_context",
    "get_current_context_or_none",
    "request_context",
    "reset_context",
    "set_context",
    # Exceptions
    "AuthenticationError",
    "ConflictError",
    "ContextNotSetError",
    "FieldValidationError",
    "ResourceNotFoundError",
    "TenantValidationCode",
    "TenantValidationError",
    # Sessions
    "ChainedSessionVerifier",
    "DevSessionVerifier",
    "SessionClaim",
    "SessionVerifier",
    "SignedSessionVerifier",
    # Tenant
    "TenantResolver",
    "TenantService",
]
