"""Core exceptions for tenant resolution and request handling."""

from enum import Enum

from golfdesk.utils.exceptions import GolfdeskError


class TenantValidationCode(str, Enum):
    """Why a tenant could not be resolved for a request."""

    MISSING_TENANT_ID = "MISSING_TENANT_ID"
    INVALID_TENANT_ID = "INVALID_TENANT_ID"
    UNAUTHENTICATED = "UNAUTHENTICATED"


class TenantValidationError(GolfdeskError):
    """Raised when the acting tenant of a request cannot be established.

    Covers a missing tenant identifier, an unknown or inactive tenant, and a
    missing or expired session. Always rendered as a validation response,
    never as a generic failure.

    Attributes:
        message: Human-readable reason, safe to return to the client
        code: Machine-readable reason
        field: Key the message is reported under in the response details
    """

    def __init__(
        self,
        message: str,
        code: TenantValidationCode,
        field: str = "tenant",
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.field = field

    def __str__(self) -> str:
        return f"TenantValidationError({self.code.value}): {self.message}"


class ResourceNotFoundError(GolfdeskError):
    """Raised when a well-formed identifier refers to nothing in this tenant.

    Attributes:
        resource: Display name of the resource type (e.g. "Reservation")
    """

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class AuthenticationError(GolfdeskError):
    """Raised when credentials or a session token are rejected.

    Attributes:
        reason: The specific reason authentication failed (logged, not returned)
    """

    def __init__(self, reason: str = "Authentication failed"):
        super().__init__(reason)
        self.reason = reason

    def __str__(self) -> str:
        return f"AuthenticationError: {self.args[0]}"


class ContextNotSetError(GolfdeskError):
    """Raised when request context is accessed outside of a request."""

    def __init__(self, message: str = "Request context is not set"):
        super().__init__(message)


class FieldValidationError(GolfdeskError):
    """Raised when request fields fail validation.

    Attributes:
        errors: Mapping of field name to human-readable message (never empty)
    """

    def __init__(self, errors: dict[str, str]):
        if not errors:
            raise ValueError("FieldValidationError requires at least one field error")
        super().__init__("Validation failed")
        self.errors = dict(errors)


class ConflictError(GolfdeskError):
    """Raised when a write would duplicate or overlap existing tenant data."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LineLoginError(GolfdeskError):
    """Raised when the LINE OAuth exchange fails.

    Attributes:
        reason: Short code placed in the error redirect (``token_error``, ``auth_failed``)
    """

    def __init__(self, reason: str, message: str | None = None):
        super().__init__(message or reason)
        self.reason = reason
