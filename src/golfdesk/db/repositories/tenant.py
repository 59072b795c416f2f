"""Repository for tenants."""

from sqlalchemy import select

from golfdesk.db.models.tenant import Tenant
from golfdesk.db.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Tenants are global rows, so this repository is not tenant-scoped."""

    model = Tenant

    async def get_active(self, tenant_id: str) -> Tenant | None:
        """Fetch a tenant only if it exists and is active, in a single read."""
        stmt = select(Tenant).where(Tenant.id == tenant_id, Tenant.is_active.is_(True))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active(self) -> list[Tenant]:
        stmt = select(Tenant).where(Tenant.is_active.is_(True)).order_by(Tenant.name)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
