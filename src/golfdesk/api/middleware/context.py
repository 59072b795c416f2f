"""Per-request context for logging and tenant correlation."""

from collections.abc import Callable
from contextlib import nullcontext
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from golfdesk.core.context import create_context, request_context
from golfdesk.core.tenant import LEGACY_TENANT_QUERY_PARAM, TENANT_QUERY_PARAM

SKIP_CONTEXT_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def requested_tenant_id(request: Request) -> str | None:
    """Tenant named in the query string. Only used to correlate log lines.

    Follows the resolver: a present ``tenant_id`` wins over ``tenantId``.
    """
    params = request.query_params
    key = TENANT_QUERY_PARAM if TENANT_QUERY_PARAM in params else LEGACY_TENANT_QUERY_PARAM
    return params.get(key) or None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Installs a RequestContext for the downstream handler.

    Runs inside AdminAuthorizationMiddleware, so ``request.state.session_claim``
    is already set for administrative paths. Every response gets an
    ``X-Request-ID`` header, including the skipped paths.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid4()
        request.state.request_id = request_id

        if request.url.path in SKIP_CONTEXT_PATHS:
            scope = nullcontext()
        else:
            scope = request_context(
                create_context(
                    session_claim=getattr(request.state, "session_claim", None),
                    requested_tenant_id=requested_tenant_id(request),
                    request_id=request_id,
                )
            )

        with scope:
            response = await call_next(request)

        response.headers["X-Request-ID"] = str(request_id)
        return response
