"""Tenant management and per-request tenant resolution."""

import time
from collections.abc import Mapping

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from golfdesk.core.exceptions import (
    ResourceNotFoundError,
    TenantValidationCode,
    TenantValidationError,
)
from golfdesk.core.session import SessionClaim
from golfdesk.db.models.tenant import Tenant
from golfdesk.db.repositories.tenant import TenantRepository

logger = structlog.get_logger("golfdesk.tenant")

TENANT_QUERY_PARAM = "tenant_id"
LEGACY_TENANT_QUERY_PARAM = "tenantId"

MISSING_TENANT_MESSAGE = "Tenant ID is required"
INVALID_TENANT_MESSAGE = "Invalid or inactive tenant"
UNAUTHENTICATED_MESSAGE = "Authentication required"


class TenantService:
    """Service for tenant provisioning and lookup."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tenants = TenantRepository(db)

    async def create_tenant(self, name: str, tenant_id: str | None = None) -> Tenant:
        """Create a new active tenant.

        Args:
            name: Display name for the tenant
            tenant_id: Explicit identifier (default: generated)

        Raises:
            IntegrityError: If ``tenant_id`` already exists
        """
        tenant = Tenant(name=name, is_active=True)
        if tenant_id:
            tenant.id = tenant_id
        tenant = await self.tenants.create(tenant)
        logger.info("tenant_created", tenant_id=tenant.id, name=name)
        return tenant

    async def get_tenant(self, tenant_id: str) -> Tenant | None:
        return await self.tenants.get(tenant_id)

    async def get_tenant_or_raise(self, tenant_id: str) -> Tenant:
        """Get a tenant by id regardless of status.

        Raises:
            ResourceNotFoundError: If the tenant does not exist
        """
        tenant = await self.get_tenant(tenant_id)
        if tenant is None:
            raise ResourceNotFoundError("Tenant")
        return tenant

    async def list_tenants(self, active_only: bool = True) -> list[Tenant]:
        if active_only:
            return await self.tenants.list_active()
        return await self.tenants.list_all(order_by="name", limit=1000)

    async def deactivate_tenant(self, tenant_id: str) -> Tenant:
        """Deactivate a tenant. Tenants are never hard-deleted.

        Raises:
            ResourceNotFoundError: If the tenant does not exist
        """
        tenant = await self.get_tenant_or_raise(tenant_id)
        if tenant.is_active:
            tenant = await self.tenants.update(tenant, {"is_active": False})
            logger.warning("tenant_deactivated", tenant_id=tenant_id)
        return tenant

    async def get_active_tenant(self, tenant_id: str) -> Tenant | None:
        """Single read that only matches an existing, active tenant."""
        return await self.tenants.get_active(tenant_id)


class TenantResolver:
    """Determines the acting tenant of a request and checks it is active.

    Every call performs exactly one database read; results are never cached
    because a tenant can be deactivated between requests.

    Example:
        resolver = TenantResolver(db)
        tenant = await resolver.resolve_from_session(request.state.session_claim)
        tenant = await resolver.resolve_from_request(request.query_params)
    """

    def __init__(self, db: AsyncSession):
        self.service = TenantService(db)

    async def resolve_from_session(
        self,
        claim: SessionClaim | None,
        now: float | None = None,
    ) -> Tenant:
        """Resolve the tenant bound to an administrative session.

        Args:
            claim: Verified session claim, or None if the request had none
            now: Current Unix time (default: ``time.time()``)

        Raises:
            TenantValidationError: With code ``UNAUTHENTICATED`` when the claim is
                absent or expired, ``INVALID_TENANT_ID`` when the tenant is
                unknown or inactive
        """
        if claim is None:
            raise TenantValidationError(
                UNAUTHENTICATED_MESSAGE, TenantValidationCode.UNAUTHENTICATED
            )
        if claim.is_expired(time.time() if now is None else now):
            raise TenantValidationError(
                UNAUTHENTICATED_MESSAGE, TenantValidationCode.UNAUTHENTICATED
            )
        return await self._load_active(claim.tenant_id)

    async def resolve_from_request(self, params: Mapping[str, str]) -> Tenant:
        """Resolve the tenant named explicitly in a query string.

        ``tenant_id`` wins whenever it is present, even blank; ``tenantId`` is
        only read when ``tenant_id`` is absent.

        Raises:
            TenantValidationError: With code ``MISSING_TENANT_ID`` (field
                ``tenant_id``) when absent or blank, ``INVALID_TENANT_ID`` when
                the tenant is unknown or inactive
        """
        key = TENANT_QUERY_PARAM if TENANT_QUERY_PARAM in params else LEGACY_TENANT_QUERY_PARAM
        tenant_id = params.get(key)
        if tenant_id is None or not tenant_id.strip():
            raise TenantValidationError(
                MISSING_TENANT_MESSAGE,
                TenantValidationCode.MISSING_TENANT_ID,
                field=TENANT_QUERY_PARAM,
            )
        return await self._load_active(tenant_id.strip())

    async def _load_active(self, tenant_id: str) -> Tenant:
        tenant = await self.service.get_active_tenant(tenant_id)
        if tenant is None:
            logger.info("tenant_rejected", requested_tenant_id=tenant_id)
            raise TenantValidationError(
                INVALID_TENANT_MESSAGE, TenantValidationCode.INVALID_TENANT_ID
            )
        return tenant
