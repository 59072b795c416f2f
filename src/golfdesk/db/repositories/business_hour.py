"""Repository for weekly business hours."""

from golfdesk.db.models.business_hour import BusinessHour
from golfdesk.db.repositories.base import TenantScopedRepository


class BusinessHourRepository(TenantScopedRepository[BusinessHour]):
    model = BusinessHour

    async def list_active(self) -> list[BusinessHour]:
        """Active hours ordered by weekday, then opening time."""
        stmt = (
            self._select()
            .where(BusinessHour.is_active.is_(True))
            .order_by(BusinessHour.day_of_week, BusinessHour.start_time)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_active_for_day(self, day_of_week: int) -> list[BusinessHour]:
        stmt = (
            self._select()
            .where(
                BusinessHour.is_active.is_(True),
                BusinessHour.day_of_week == day_of_week,
            )
            .order_by(BusinessHour.start_time)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def deactivate(self, hour: BusinessHour) -> BusinessHour:
        return await self.update(hour, {"is_active": False})
