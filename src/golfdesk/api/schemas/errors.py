"""Error envelope schemas.

Every error leaving the API has a top-level ``error`` string. Validation
failures add a ``details`` map of field to message; method mismatches add
the allowed methods.
"""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Generic error envelope."""

    error: str = Field(..., description="Human-readable error message")

    model_config = {"json_schema_extra": {"example": {"error": "Internal server error"}}}


class ValidationErrorResponse(ErrorResponse):
    """Envelope for field-level validation failures (400)."""

    error: str = "Validation failed"
    details: dict[str, str] = Field(..., description="Field name to message")

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "Validation failed",
                "details": {"tenant_id": "Tenant ID is required"},
            }
        }
    }


class MethodNotAllowedResponse(ErrorResponse):
    """Envelope for 405 responses."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = "Method not allowed"
    allowed_methods: list[str] = Field(..., alias="allowedMethods")


class MessageResponse(BaseModel):
    """Plain acknowledgement payload."""

    message: str
