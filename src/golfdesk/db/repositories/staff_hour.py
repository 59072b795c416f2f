"""Repository for staff member working hours."""

from golfdesk.db.models.staff_hour import StaffMemberBusinessHour
from golfdesk.db.repositories.base import TenantScopedRepository


class StaffMemberBusinessHourRepository(TenantScopedRepository[StaffMemberBusinessHour]):
    model = StaffMemberBusinessHour

    async def list_active(
        self,
        *,
        staff_member_id: str | None = None,
        day_of_week: int | None = None,
    ) -> list[StaffMemberBusinessHour]:
        """Active hours ordered by weekday, then start time.

        Without ``staff_member_id`` every staff member of the tenant is included.
        """
        stmt = self._select().where(StaffMemberBusinessHour.is_active.is_(True))
        if staff_member_id is not None:
            stmt = stmt.where(StaffMemberBusinessHour.staff_member_id == staff_member_id)
        if day_of_week is not None:
            stmt = stmt.where(StaffMemberBusinessHour.day_of_week == day_of_week)
        stmt = stmt.order_by(
            StaffMemberBusinessHour.day_of_week, StaffMemberBusinessHour.start_time
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
