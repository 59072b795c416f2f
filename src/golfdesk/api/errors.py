"""Exception handlers that render framework errors through the response envelope.

Unknown routes, method mismatches and malformed request bodies are raised by
Starlette and FastAPI before any handler runs; these handlers give them the
same ``{"error": ...}`` shape as everything else.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from golfdesk.api.responses import (
    error_response,
    method_not_allowed_response,
    not_found_response,
    unauthorized_response,
    validation_error_response,
)

CANDIDATE_METHODS = ("DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT")


def allowed_methods_for(request: Request) -> list[str]:
    """Every method some route accepts for the request path.

    Each candidate method is matched against the top-level routes, so routers
    that are included (and nested) are asked through their own matching.
    """
    allowed = []
    for method in CANDIDATE_METHODS:
        scope = {**request.scope, "method": method}
        for route in request.app.router.routes:
            match, _ = route.matches(scope)
            if match is Match.FULL:
                allowed.append(method)
                break
    return sorted(allowed)


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query" source marker
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts) or "request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return not_found_response()
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            allowed = allowed_methods_for(request)
            if not allowed and exc.headers:
                allowed = [m.strip() for m in exc.headers.get("Allow", "").split(",") if m.strip()]
            return method_not_allowed_response(allowed)
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            return unauthorized_response()
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return error_response(message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details: dict[str, str] = {}
        for err in exc.errors():
            details.setdefault(_field_name(tuple(err.get("loc", ()))), err.get("msg", "Invalid value"))
        if not details:
            details["request"] = "Invalid request"
        return validation_error_response(details)
