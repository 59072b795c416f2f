"""Authorization middleware for administrative routes.

The decision itself is the pure function ``evaluate_authorization``; the
middleware only gathers its inputs (path, verified claim, clock) and turns an
``UNAUTHORIZED`` outcome into a redirect or a 401.
"""

import re
import time
from collections.abc import Callable
from enum import Enum
from typing import Literal

import structlog
from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ConfigDict
from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from golfdesk.api.responses import unauthorized_response
from golfdesk.config.settings import Settings
from golfdesk.core.session import SessionClaim, SessionVerifier

logger = structlog.get_logger("golfdesk.api.auth")

_BEARER = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


class AuthorizationOutcome(str, Enum):
    UNAUTHORIZED = "unauthorized"
    AUTHORIZED = "authorized"


class AuthorizationConfig(BaseModel):
    """Route protection settings, fixed at application construction."""

    model_config = ConfigDict(frozen=True)

    login_path: str = "/admin/login"
    protected_prefixes: tuple[str, ...] = ("/admin", "/api/admin")
    # Credential endpoints under a protected prefix that must stay reachable
    exempt_paths: tuple[str, ...] = ("/api/admin/login", "/api/admin/logout")
    api_prefix: str = "/api/admin"
    api_unauthorized_mode: Literal["redirect", "status"] = "redirect"
    session_cookie_name: str = "golfdesk_session"

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthorizationConfig":
        return cls(
            login_path=settings.LOGIN_PATH,
            protected_prefixes=tuple(settings.ADMIN_PATH_PREFIXES),
            api_prefix=settings.ADMIN_API_PREFIX,
            api_unauthorized_mode=settings.ADMIN_API_UNAUTHORIZED_MODE,
            session_cookie_name=settings.SESSION_COOKIE_NAME,
        )


def _normalize(path: str) -> str:
    return path.rstrip("/") or "/"


def path_has_prefix(path: str, prefix: str) -> bool:
    """Segment-aware prefix match: ``/admin`` covers ``/admin/x`` but not ``/administrator``."""
    path = _normalize(path)
    prefix = _normalize(prefix)
    if prefix == "/":
        return True
    return path == prefix or path.startswith(prefix + "/")


def evaluate_authorization(
    path: str,
    claim: SessionClaim | None,
    now: float,
    config: AuthorizationConfig,
) -> AuthorizationOutcome:
    """Decide whether a request may proceed.

    The login page is always reachable. Paths under a protected prefix need a
    claim that has not expired. Everything else is public.
    """
    normalized = _normalize(path)
    if normalized == _normalize(config.login_path):
        return AuthorizationOutcome.AUTHORIZED
    if normalized in {_normalize(p) for p in config.exempt_paths}:
        return AuthorizationOutcome.AUTHORIZED

    if not any(path_has_prefix(path, prefix) for prefix in config.protected_prefixes):
        return AuthorizationOutcome.AUTHORIZED

    if claim is None:
        return AuthorizationOutcome.UNAUTHORIZED
    if claim.is_expired(now):
        return AuthorizationOutcome.UNAUTHORIZED
    return AuthorizationOutcome.AUTHORIZED


class AdminAuthorizationMiddleware(BaseHTTPMiddleware):
    """Middleware that guards administrative pages and API routes.

    Reads the session token from the session cookie or a Bearer header and
    verifies it through the configured ``SessionVerifier``.

    Sets:
        request.state.session_claim: The verified claim, or None
    """

    def __init__(
        self,
        app: ASGIApp,
        verifier: SessionVerifier,
        config: AuthorizationConfig | None = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(app)
        self.verifier = verifier
        self.config = config or AuthorizationConfig()
        self.clock = clock

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Verify the session, then let the request through or turn it away."""
        claim = self._verify(request)
        request.state.session_claim = claim

        path = request.url.path
        outcome = evaluate_authorization(path, claim, self.clock(), self.config)
        if outcome is AuthorizationOutcome.AUTHORIZED:
            return await call_next(request)

        logger.info(
            "admin_request_unauthorized",
            http_path=path,
            has_claim=claim is not None,
        )
        if (
            self.config.api_unauthorized_mode == "status"
            and path_has_prefix(path, self.config.api_prefix)
        ):
            return unauthorized_response()
        return RedirectResponse(self.config.login_path, status_code=status.HTTP_302_FOUND)

    def _verify(self, request: Request) -> SessionClaim | None:
        """First token that verifies: the session cookie, then a Bearer header."""
        for token in self._candidate_tokens(request):
            claim = self.verifier.verify(token)
            if claim is not None:
                return claim
        return None

    def _candidate_tokens(self, request: Request) -> list[str]:
        tokens = []
        cookie = request.cookies.get(self.config.session_cookie_name)
        if cookie:
            tokens.append(cookie)
        match = _BEARER.match(request.headers.get("Authorization") or "")
        if match and match.group(1).strip():
            tokens.append(match.group(1).strip())
        return tokens
