"""Error handling middleware for mapping exceptions to envelope responses."""

from collections.abc import Callable

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware

from golfdesk.api.responses import (
    error_response,
    not_found_response,
    unauthorized_response,
    validation_error_response,
)
from golfdesk.core.exceptions import (
    AuthenticationError,
    ConflictError,
    FieldValidationError,
    ResourceNotFoundError,
    TenantValidationError,
)
from golfdesk.core.logging import log_exception

logger = structlog.get_logger("golfdesk.api.errors")


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware that turns exceptions raised by handlers into envelopes.

    Tenant and field validation failures become 400 validation envelopes,
    missing resources 404, rejected credentials 401 and conflicts 409.
    Anything else is logged with full detail and answered with a generic 500.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return self._handle_exception(request, exc)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        response = self._map_exception(request, exc)
        request_id = getattr(request.state, "request_id", None)
        if request_id is not None:
            response.headers["X-Request-ID"] = str(request_id)
        return response

    def _map_exception(self, request: Request, exc: Exception) -> JSONResponse:
        if isinstance(exc, TenantValidationError):
            logger.info("tenant_validation_failed", code=exc.code.value, http_path=request.url.path)
            return validation_error_response({exc.field: exc.message})

        if isinstance(exc, FieldValidationError):
            return validation_error_response(exc.errors)

        if isinstance(exc, ResourceNotFoundError):
            return not_found_response(exc.resource)

        if isinstance(exc, AuthenticationError):
            logger.info("authentication_failed", reason=exc.reason)
            return unauthorized_response()

        if isinstance(exc, ConflictError):
            return error_response(exc.message, status.HTTP_409_CONFLICT)

        log_exception(
            logger,
            exc,
            http_method=request.method,
            http_path=request.url.path,
            request_id=str(getattr(request.state, "request_id", "unknown")),
        )
        return error_response()
