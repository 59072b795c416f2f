"""Working hours of individual staff members.

A staff member's window must fit inside one of the tenant's business hours
on the same weekday, and a staff member's windows on one day never overlap.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from golfdesk.booking.hours import (
    DAY_OF_WEEK_MESSAGE,
    TIME_REQUIRED_MESSAGE,
    overlaps,
    to_minutes,
)
from golfdesk.core.exceptions import (
    ConflictError,
    FieldValidationError,
    ResourceNotFoundError,
)
from golfdesk.db.models.business_hour import BusinessHour
from golfdesk.db.models.staff_hour import StaffMemberBusinessHour
from golfdesk.db.repositories.business_hour import BusinessHourRepository
from golfdesk.db.repositories.staff import StaffMemberRepository
from golfdesk.db.repositories.staff_hour import StaffMemberBusinessHourRepository

logger = structlog.get_logger("golfdesk.booking.staff_hours")

ALL_STAFF = "all"

STAFF_REQUIRED_MESSAGE = "Staff member ID is required"
START_BEFORE_END_MESSAGE = "Start time must be before end time"
CLOSED_DAY_MESSAGE = "The tenant is not open on this day"


def _require_staff_id(staff_member_id: str | None) -> str:
    if not staff_member_id:
        raise FieldValidationError({"staff_member_id": STAFF_REQUIRED_MESSAGE})
    return staff_member_id


def _require_day(day_of_week: int | None) -> int:
    if day_of_week is None or not 0 <= day_of_week <= 6:
        raise FieldValidationError({"day_of_week": DAY_OF_WEEK_MESSAGE})
    return day_of_week


def _window(hour: BusinessHour | StaffMemberBusinessHour) -> tuple[int, int] | None:
    start = to_minutes(hour.start_time)
    end = to_minutes(hour.end_time)
    if start is None or end is None:
        return None
    return start, end


class StaffHourService:
    """Staff member working hours of one tenant."""

    def __init__(self, db: AsyncSession, tenant_id: str):
        self.db = db
        self.staff_hours = StaffMemberBusinessHourRepository(db, tenant_id)
        self.tenant_hours = BusinessHourRepository(db, tenant_id)
        self.staff = StaffMemberRepository(db, tenant_id)

    async def list_active(self, staff_member_id: str | None) -> list[StaffMemberBusinessHour]:
        """Active hours of one staff member, or of every staff member for ``all``.

        Raises:
            FieldValidationError: If no staff member id was given
            ResourceNotFoundError: If the staff member is not in this tenant
        """
        staff_member_id = _require_staff_id(staff_member_id)
        if staff_member_id == ALL_STAFF:
            return await self.staff_hours.list_active()
        await self._staff_or_raise(staff_member_id)
        return await self.staff_hours.list_active(staff_member_id=staff_member_id)

    async def list_published(self, staff_member_id: str | None) -> list[StaffMemberBusinessHour]:
        """Hours shown to booking users; a staff member without any is a 404."""
        staff_member_id = _require_staff_id(staff_member_id)
        if staff_member_id == ALL_STAFF:
            return await self.staff_hours.list_active()
        hours = await self.staff_hours.list_active(staff_member_id=staff_member_id)
        if not hours:
            raise ResourceNotFoundError("Staff business hours")
        return hours

    async def create(
        self,
        staff_member_id: str | None,
        day_of_week: int | None,
        start_time: str | None,
        end_time: str | None,
    ) -> StaffMemberBusinessHour:
        """Add a working window for a staff member.

        Raises:
            FieldValidationError: On missing input, a malformed or inverted
                window, or one that is outside the tenant's hours that day
            ResourceNotFoundError: If the staff member is not in this tenant
            ConflictError: If the window overlaps another active window of
                the same staff member on that day
        """
        staff_member_id = _require_staff_id(staff_member_id)
        day_of_week = _require_day(day_of_week)
        if not start_time or not end_time:
            raise FieldValidationError({"time": TIME_REQUIRED_MESSAGE})
        await self._staff_or_raise(staff_member_id)

        start = to_minutes(start_time)
        end = to_minutes(end_time)
        if start is None or end is None or start >= end:
            raise FieldValidationError({"time_range": START_BEFORE_END_MESSAGE})

        tenant_hours = await self._open_hours(day_of_week)
        if not any(
            window[0] <= start and end <= window[1]
            for window in map(_window, tenant_hours)
            if window is not None
        ):
            shown = ", ".join(f"{h.start_time}-{h.end_time}" for h in tenant_hours)
            raise FieldValidationError(
                {"time_range": f"Staff hours must fall within the tenant's business hours ({shown})"}
            )

        existing = await self.staff_hours.list_active(
            staff_member_id=staff_member_id, day_of_week=day_of_week
        )
        for hour in existing:
            window = _window(hour)
            if window is not None and overlaps(start, end, *window):
                raise ConflictError(
                    f"Time overlaps the existing {hour.start_time}-{hour.end_time} slot"
                )

        hour = await self.staff_hours.create(
            StaffMemberBusinessHour(
                staff_member_id=staff_member_id,
                day_of_week=day_of_week,
                start_time=start_time,
                end_time=end_time,
                is_active=True,
            )
        )
        logger.info(
            "staff_hour_created",
            staff_member_id=staff_member_id,
            staff_hour_id=hour.id,
            day_of_week=day_of_week,
        )
        return hour

    async def copy_tenant_hours(
        self, staff_member_id: str | None, day_of_week: int | None
    ) -> list[StaffMemberBusinessHour]:
        """Replace a staff member's hours on one day with the tenant's hours.

        The old windows are deactivated and the copies inserted in a single
        commit, so a failure leaves the previous hours in place.

        Raises:
            FieldValidationError: On missing input or a day the tenant is closed
            ResourceNotFoundError: If the staff member is not in this tenant
        """
        staff_member_id = _require_staff_id(staff_member_id)
        day_of_week = _require_day(day_of_week)
        await self._staff_or_raise(staff_member_id)
        tenant_hours = await self._open_hours(day_of_week)

        for hour in await self.staff_hours.list_active(
            staff_member_id=staff_member_id, day_of_week=day_of_week
        ):
            await self.staff_hours.update(hour, {"is_active": False}, commit=False)

        copies = await self.staff_hours.create_many(
            [
                StaffMemberBusinessHour(
                    staff_member_id=staff_member_id,
                    day_of_week=day_of_week,
                    start_time=h.start_time,
                    end_time=h.end_time,
                    is_active=True,
                )
                for h in tenant_hours
            ],
            commit=False,
        )
        await self.db.commit()
        logger.info(
            "staff_hours_copied",
            staff_member_id=staff_member_id,
            day_of_week=day_of_week,
            count=len(copies),
        )
        return copies

    async def deactivate(self, hour_id: str | None) -> StaffMemberBusinessHour:
        """Soft-delete a staff member window of this tenant.

        Raises:
            FieldValidationError: If no id was given
            ResourceNotFoundError: If the id is unknown in this tenant
        """
        if not hour_id:
            raise FieldValidationError({"id": "ID is required"})
        hour = await self.staff_hours.get(hour_id)
        if hour is None:
            raise ResourceNotFoundError("Staff member business hour")
        hour = await self.staff_hours.update(hour, {"is_active": False})
        logger.info("staff_hour_deactivated", staff_hour_id=hour.id)
        return hour

    async def _staff_or_raise(self, staff_member_id: str) -> None:
        if await self.staff.get(staff_member_id) is None:
            raise ResourceNotFoundError("Staff member")

    async def _open_hours(self, day_of_week: int) -> list[BusinessHour]:
        hours = await self.tenant_hours.list_active_for_day(day_of_week)
        if not hours:
            raise FieldValidationError({"time_range": CLOSED_DAY_MESSAGE})
        return hours
