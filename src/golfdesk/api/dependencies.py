"""FastAPI dependencies for API endpoints.

Administrative handlers take ``SessionTenant``; public handlers take
``RequestTenant``. Both raise ``TenantValidationError``, which the error
middleware renders as a 400 validation envelope.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from golfdesk.config.settings import Settings
from golfdesk.core.exceptions import AuthenticationError
from golfdesk.core.session import SessionClaim, SignedSessionVerifier
from golfdesk.core.tenant import TenantResolver
from golfdesk.db.config import get_db
from golfdesk.db.models.admin import AdminUser
from golfdesk.db.models.tenant import Tenant
from golfdesk.db.repositories.admin import AdminUserRepository

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_signer(request: Request) -> SignedSessionVerifier | None:
    """The JWT signer, or None when no session secret is configured."""
    return getattr(request.app.state, "session_signer", None)


def get_session_claim(request: Request) -> SessionClaim | None:
    """Claim verified by AdminAuthorizationMiddleware for this request."""
    return getattr(request.state, "session_claim", None)


async def get_session_tenant(
    claim: Annotated[SessionClaim | None, Depends(get_session_claim)],
    db: DbSession,
) -> Tenant:
    return await TenantResolver(db).resolve_from_session(claim)


async def get_request_tenant(request: Request, db: DbSession) -> Tenant:
    return await TenantResolver(db).resolve_from_request(request.query_params)


async def get_current_admin(
    claim: Annotated[SessionClaim | None, Depends(get_session_claim)],
    tenant: Annotated[Tenant, Depends(get_session_tenant)],
    db: DbSession,
) -> AdminUser:
    """The administrator behind the session, within the session's tenant.

    Raises:
        AuthenticationError: If the session's username has no account in the tenant
    """
    admin = await AdminUserRepository(db).get_by_username(claim.username)
    if admin is None or admin.tenant_id != tenant.id:
        raise AuthenticationError("Session user has no administrator account")
    return admin


AppSettings = Annotated[Settings, Depends(get_app_settings)]
SessionTenant = Annotated[Tenant, Depends(get_session_tenant)]
RequestTenant = Annotated[Tenant, Depends(get_request_tenant)]
CurrentAdmin = Annotated[AdminUser, Depends(get_current_admin)]
