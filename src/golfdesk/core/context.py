"""Per-request context propagated through async call chains.

Usage:
    from golfdesk.core.context import create_context, request_context, get_current_context

    ctx = create_context(requested_tenant_id="t1")
    with request_context(ctx):
        current = get_current_context()

The context is ephemeral: it lives for one request and is never persisted.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from golfdesk.core.exceptions import ContextNotSetError
from golfdesk.core.session import SessionClaim


class RequestContext(BaseModel):
    """Context for a single request.

    Administrative requests carry the verified session claim; public requests
    carry the tenant identifier they supplied in the query string.
    """

    request_id: UUID = Field(default_factory=uuid4)
    session_claim: SessionClaim | None = None
    requested_tenant_id: str | None = None
    initiated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def tenant_id(self) -> str | None:
        if self.session_claim is not None:
            return self.session_claim.tenant_id
        return self.requested_tenant_id

    @property
    def username(self) -> str | None:
        return self.session_claim.username if self.session_claim else None

    def to_log_dict(self) -> dict[str, Any]:
        """Fields added to every log entry emitted inside this context."""
        return {
            "request_id": str(self.request_id),
            "tenant_id": self.tenant_id,
            "username": self.username,
        }


_request_context: ContextVar[RequestContext | None] = ContextVar("request_context", default=None)


def get_current_context() -> RequestContext:
    """Get the current request context.

    Raises:
        ContextNotSetError: If no context is set in the current execution context
    """
    ctx = _request_context.get()
    if ctx is None:
        raise ContextNotSetError(
            "No request context is set. Use request_context() context manager."
        )
    return ctx


def get_current_context_or_none() -> RequestContext | None:
    """Get the current request context, or None if not set."""
    return _request_context.get()


def set_context(ctx: RequestContext) -> Token[RequestContext | None]:
    """Low-level setter. Prefer the request_context() context manager."""
    return _request_context.set(ctx)


def reset_context(token: Token[RequestContext | None]) -> None:
    """Low-level reset. Prefer the request_context() context manager."""
    _request_context.reset(token)


@contextmanager
def request_context(ctx: RequestContext) -> Iterator[RequestContext]:
    """Set ``ctx`` as the current context for the duration of the block."""
    token = set_context(ctx)
    try:
        yield ctx
    finally:
        reset_context(token)


def create_context(
    *,
    session_claim: SessionClaim | None = None,
    requested_tenant_id: str | None = None,
    request_id: UUID | None = None,
) -> RequestContext:
    """Factory for RequestContext with defaults."""
    return RequestContext(
        request_id=request_id or uuid4(),
        session_claim=session_claim,
        requested_tenant_id=requested_tenant_id or None,
    )
