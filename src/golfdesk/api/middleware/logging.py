"""Access log middleware."""

import time
from collections.abc import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from golfdesk.core.logging import log_request_end

logger = structlog.get_logger("golfdesk.api.requests")


def client_ip(request: Request) -> str | None:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",", 1)[0].strip()
    return request.headers.get("X-Real-IP") or (request.client.host if request.client else None)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Outermost middleware, so the logged status is the one the client sees."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        claim = getattr(request.state, "session_claim", None)
        log_request_end(
            logger,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id=str(getattr(request.state, "request_id", "-")),
            tenant_id=claim.tenant_id if claim else None,
            client_ip=client_ip(request),
        )
        return response
