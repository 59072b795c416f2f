"""API schemas."""

from .errors import (
    ErrorResponse,
    MessageResponse,
    MethodNotAllowedResponse,
    ValidationErrorResponse,
)

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "MethodNotAllowedResponse",
    "ValidationErrorResponse",
]
