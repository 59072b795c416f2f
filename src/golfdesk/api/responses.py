"""Response envelope helpers.

Successful responses carry the raw payload. Errors always carry a top-level
``error`` string so clients can branch on its presence:

    return api_response(reservations)
    return validation_error_response({"tenant": "Invalid or inactive tenant"})
    return not_found_response("Reservation")
"""

from collections.abc import Iterable, Mapping
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette import status

from golfdesk.api.schemas.errors import (
    ErrorResponse,
    MethodNotAllowedResponse,
    ValidationErrorResponse,
)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def api_response(data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Wrap a payload (models, lists, dicts or None) without an envelope."""
    return JSONResponse(status_code=status_code, content=jsonable_encoder(data))


def error_response(
    message: str = INTERNAL_ERROR_MESSAGE,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def validation_error_response(errors: Mapping[str, str]) -> JSONResponse:
    """400 envelope listing every failed field.

    Raises:
        ValueError: If ``errors`` is empty; a validation failure must name a field
    """
    if not errors:
        raise ValueError("validation_error_response requires at least one field error")
    body = ValidationErrorResponse(details=dict(errors))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


def not_found_response(resource: str = "Resource") -> JSONResponse:
    return error_response(f"{resource} not found", status.HTTP_404_NOT_FOUND)


def unauthorized_response() -> JSONResponse:
    return error_response("Unauthorized", status.HTTP_401_UNAUTHORIZED)


def method_not_allowed_response(allowed: Iterable[str]) -> JSONResponse:
    allowed_methods = list(allowed)
    body = MethodNotAllowedResponse(allowed_methods=allowed_methods)
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content=body.model_dump(by_alias=True),
        headers={"Allow": ", ".join(allowed_methods)},
    )
