"""Authentication endpoints.

Administrators sign in with a username and password and receive a signed
session cookie. Booking users sign in through LINE; their profile is kept in
a separate cookie and never grants administrative access.
"""

import json
import secrets
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError
from starlette import status

from golfdesk.api.dependencies import (
    AppSettings,
    CurrentAdmin,
    DbSession,
    SessionTenant,
    get_session_claim,
    get_session_signer,
)
from golfdesk.api.responses import (
    api_response,
    error_response,
    unauthorized_response,
    validation_error_response,
)
from golfdesk.api.schemas.auth import (
    DevLoginRequest,
    LineUser,
    LoginRequest,
    PasswordChangeRequest,
    SessionInfo,
)
from golfdesk.api.schemas.errors import MessageResponse
from golfdesk.config.settings import Settings
from golfdesk.core.auth import authenticate_admin, change_password
from golfdesk.core.exceptions import LineLoginError
from golfdesk.core.line import LineLoginClient, LineProfile
from golfdesk.core.session import DEV_USERS, DevSessionVerifier, SessionClaim, SignedSessionVerifier

logger = structlog.get_logger("golfdesk.api.auth")

router = APIRouter(tags=["auth"])

LINE_STATE_COOKIE = "line_state"
LINE_STATE_MAX_AGE_SECONDS = 600
BOOKING_PAGE = "/reserve"


def get_line_client(settings: AppSettings) -> LineLoginClient:
    return LineLoginClient.from_settings(settings)


def _set_session_cookie(response: Response, settings: Settings, token: str) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.ENVIRONMENT == "production",
    )


def _set_line_user_cookie(response: Response, settings: Settings, user: LineUser) -> None:
    response.set_cookie(
        settings.LINE_USER_COOKIE_NAME,
        user.model_dump_json(),
        max_age=settings.LINE_USER_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        secure=settings.ENVIRONMENT == "production",
    )


def _site_url(settings: Settings, path: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}{path}"


# Administrator sessions


@router.post(
    "/api/admin/login",
    response_model=SessionInfo,
    summary="Administrator login",
)
async def admin_login(
    body: LoginRequest,
    db: DbSession,
    settings: AppSettings,
    signer: Annotated[SignedSessionVerifier | None, Depends(get_session_signer)],
) -> JSONResponse:
    """Check credentials and set the session cookie.

    Rejected credentials raise AuthenticationError, rendered as 401.
    """
    if signer is None:
        logger.error("admin_login_unavailable", reason="no_session_secret")
        return error_response("Session signing is not configured", status.HTTP_503_SERVICE_UNAVAILABLE)

    admin = await authenticate_admin(db, body.username, body.password)
    token = signer.issue(admin.tenant_id, admin.username)
    claim = signer.verify(token)

    response = api_response(
        SessionInfo(tenant_id=admin.tenant_id, username=admin.username, exp=claim.exp if claim else None)
    )
    _set_session_cookie(response, settings, token)
    logger.info("admin_logged_in", username=admin.username, tenant_id=admin.tenant_id)
    return response


@router.post("/api/admin/logout", response_model=MessageResponse)
async def admin_logout(settings: AppSettings) -> JSONResponse:
    response = api_response(MessageResponse(message="Logged out"))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/api/admin/session", response_model=SessionInfo)
async def admin_session(
    tenant: SessionTenant,
    claim: Annotated[SessionClaim | None, Depends(get_session_claim)],
) -> SessionInfo:
    """The current session. Only reachable with a live claim for an active tenant."""
    return SessionInfo(tenant_id=tenant.id, username=claim.username, exp=claim.exp)


@router.post("/api/admin/password", response_model=MessageResponse)
async def admin_change_password(
    body: PasswordChangeRequest,
    admin: CurrentAdmin,
    db: DbSession,
) -> MessageResponse:
    await change_password(
        db,
        admin,
        current_password=body.currentPassword,
        new_password=body.newPassword,
        confirm_password=body.confirmPassword,
    )
    return MessageResponse(message="Password changed successfully")


# Development login


@router.post("/api/auth/dev", summary="Development-only demo login")
async def dev_login(body: DevLoginRequest, settings: AppSettings) -> Response:
    """Sign in as a hardcoded demo user. Refused unless DEV_AUTH_ENABLED is set."""
    if not settings.DEV_AUTH_ENABLED:
        return error_response("Development only", status.HTTP_403_FORBIDDEN)

    user_type = body.userType if body.userType in DEV_USERS else "guest"
    dev_user = DEV_USERS[user_type]

    response = RedirectResponse(_site_url(settings, BOOKING_PAGE), status_code=status.HTTP_303_SEE_OTHER)
    _set_line_user_cookie(
        response,
        settings,
        LineUser(user_id=dev_user.username, displayName=dev_user.display_name),
    )
    if settings.DEV_TENANT_ID:
        _set_session_cookie(response, settings, DevSessionVerifier.token_for(user_type))
    logger.warning("dev_login", user_type=user_type)
    return response


# LINE login for booking users


@router.get("/api/auth/line", summary="Start LINE login")
async def line_login(
    settings: AppSettings,
    client: Annotated[LineLoginClient, Depends(get_line_client)],
) -> RedirectResponse:
    state = secrets.token_urlsafe(16)
    response = RedirectResponse(client.authorize_url(state))
    response.set_cookie(
        LINE_STATE_COOKIE,
        state,
        max_age=LINE_STATE_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/api/auth/line/callback", summary="LINE login callback")
async def line_callback(
    request: Request,
    settings: AppSettings,
    client: Annotated[LineLoginClient, Depends(get_line_client)],
) -> RedirectResponse:
    """Finish LINE login. Failures redirect to the home page with an error code."""
    code = request.query_params.get("code")
    state = request.query_params.get("state")
    stored_state = request.cookies.get(LINE_STATE_COOKIE)

    if not code or not state or not stored_state or not secrets.compare_digest(state, stored_state):
        return RedirectResponse(_site_url(settings, "/?error=invalid_state"))

    try:
        async with client:
            access_token = await client.exchange_code(code)
            profile: LineProfile = await client.fetch_profile(access_token)
    except LineLoginError as e:
        return RedirectResponse(_site_url(settings, f"/?error={e.reason}"))

    response = RedirectResponse(_site_url(settings, BOOKING_PAGE))
    _set_line_user_cookie(
        response,
        settings,
        LineUser(
            user_id=profile.userId,
            displayName=profile.displayName,
            pictureUrl=profile.pictureUrl,
        ),
    )
    response.delete_cookie(LINE_STATE_COOKIE)
    logger.info("line_user_logged_in")
    return response


@router.get("/api/user", response_model=LineUser, summary="Current booking user")
async def current_line_user(request: Request, settings: AppSettings) -> Response:
    raw = request.cookies.get(settings.LINE_USER_COOKIE_NAME)
    if not raw:
        return unauthorized_response()
    try:
        user = LineUser.model_validate(json.loads(raw))
    except (ValueError, ValidationError):
        return validation_error_response({"user_data": "Invalid user data"})
    return api_response(user)
