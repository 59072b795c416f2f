"""Repository for staff members."""

from golfdesk.db.models.staff import StaffMember
from golfdesk.db.repositories.base import TenantScopedRepository


class StaffMemberRepository(TenantScopedRepository[StaffMember]):
    model = StaffMember

    async def list_active(self) -> list[StaffMember]:
        stmt = (
            self._select()
            .where(StaffMember.is_active.is_(True))
            .order_by(StaffMember.name)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_name(self, name: str, *, exclude_id: str | None = None) -> StaffMember | None:
        stmt = self._select().where(StaffMember.name == name)
        if exclude_id is not None:
            stmt = stmt.where(StaffMember.id != exclude_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()
