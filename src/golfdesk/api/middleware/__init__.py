"""API middleware components."""

from .auth import (
    AdminAuthorizationMiddleware,
    AuthorizationConfig,
    AuthorizationOutcome,
    evaluate_authorization,
)
from .context import RequestContextMiddleware
from .errors import ErrorHandlingMiddleware
from .logging import RequestLoggingMiddleware

__all__ = [
    "AdminAuthorizationMiddleware",
    "AuthorizationConfig",
    "AuthorizationOutcome",
    "ErrorHandlingMiddleware",
    "RequestContextMiddleware",
    "RequestLoggingMiddleware",
    "evaluate_authorization",
]
