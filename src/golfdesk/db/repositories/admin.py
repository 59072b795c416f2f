"""Repository for administrator accounts."""

from sqlalchemy import select

from golfdesk.db.models.admin import AdminUser
from golfdesk.db.repositories.base import BaseRepository


class AdminUserRepository(BaseRepository[AdminUser]):
    """Administrator lookup happens before a tenant is known, so it is unscoped."""

    model = AdminUser

    async def get_by_username(self, username: str) -> AdminUser | None:
        stmt = select(AdminUser).where(AdminUser.username == username)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_tenant(self, tenant_id: str) -> list[AdminUser]:
        stmt = (
            select(AdminUser)
            .where(AdminUser.tenant_id == tenant_id)
            .order_by(AdminUser.username)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
