"""Weekly business hours management."""

import re

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from golfdesk.core.exceptions import (
    ConflictError,
    FieldValidationError,
    ResourceNotFoundError,
)
from golfdesk.db.models.business_hour import BusinessHour
from golfdesk.db.repositories.business_hour import BusinessHourRepository

logger = structlog.get_logger("golfdesk.booking.hours")

OPENING_MINUTES = 9 * 60
CLOSING_MINUTES = 18 * 60

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

DAY_OF_WEEK_MESSAGE = "Invalid day_of_week. Must be 0-6."
TIME_REQUIRED_MESSAGE = "start_time and end_time are required"
TIME_RANGE_MESSAGE = (
    "Invalid time range. Business hours must be between 09:00-18:00 "
    "and start time must be before end time"
)


def to_minutes(value: str) -> int | None:
    """Minutes since midnight for an ``HH:MM`` string, None if malformed."""
    match = _TIME_PATTERN.match(value)
    if match is None:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def overlaps(start: int, end: int, other_start: int, other_end: int) -> bool:
    """Half-open interval overlap; touching windows do not overlap."""
    return start < other_end and end > other_start


class BusinessHourService:
    """Business hours of one tenant."""

    def __init__(self, db: AsyncSession, tenant_id: str):
        self.hours = BusinessHourRepository(db, tenant_id)

    async def list_active(self) -> list[BusinessHour]:
        return await self.hours.list_active()

    async def create(
        self,
        day_of_week: int | None,
        start_time: str | None,
        end_time: str | None,
    ) -> BusinessHour:
        """Add an opening window.

        Raises:
            FieldValidationError: On a bad weekday, missing times or a window
                outside 09:00-18:00
            ConflictError: If the window overlaps an active window on the same day
        """
        if day_of_week is None or not 0 <= day_of_week <= 6:
            raise FieldValidationError({"day_of_week": DAY_OF_WEEK_MESSAGE})
        if not start_time or not end_time:
            raise FieldValidationError({"time": TIME_REQUIRED_MESSAGE})

        start = to_minutes(start_time)
        end = to_minutes(end_time)
        if (
            start is None
            or end is None
            or start < OPENING_MINUTES
            or end > CLOSING_MINUTES
            or start >= end
        ):
            raise FieldValidationError({"time_range": TIME_RANGE_MESSAGE})

        for existing in await self.hours.list_active_for_day(day_of_week):
            existing_start = to_minutes(existing.start_time)
            existing_end = to_minutes(existing.end_time)
            if existing_start is None or existing_end is None:
                continue
            if overlaps(start, end, existing_start, existing_end):
                raise ConflictError(
                    f"Time overlaps the existing {existing.start_time}-{existing.end_time} slot"
                )

        hour = await self.hours.create(
            BusinessHour(
                day_of_week=day_of_week,
                start_time=start_time,
                end_time=end_time,
                is_active=True,
            )
        )
        logger.info("business_hour_created", business_hour_id=hour.id, day_of_week=day_of_week)
        return hour

    async def deactivate(self, hour_id: str | None) -> BusinessHour:
        """Soft-delete a window of this tenant.

        Raises:
            FieldValidationError: If no id was given
            ResourceNotFoundError: If the id is unknown in this tenant
        """
        if not hour_id:
            raise FieldValidationError({"id": "ID is required"})
        hour = await self.hours.get(hour_id)
        if hour is None:
            raise ResourceNotFoundError("Business hour")
        hour = await self.hours.deactivate(hour)
        logger.info("business_hour_deactivated", business_hour_id=hour.id)
        return hour
