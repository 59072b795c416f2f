"""Staff member management."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from golfdesk.core.exceptions import (
    ConflictError,
    FieldValidationError,
    ResourceNotFoundError,
)
from golfdesk.db.models.staff import StaffMember
from golfdesk.db.repositories.reservation import ReservationRepository
from golfdesk.db.repositories.staff import StaffMemberRepository

logger = structlog.get_logger("golfdesk.booking.staff")

NAME_REQUIRED_MESSAGE = "Name is required and must be a non-empty string"
DUPLICATE_NAME_MESSAGE = "A staff member with this name already exists"


def _clean_name(name: str | None) -> str:
    if not name or not name.strip():
        raise FieldValidationError({"name": NAME_REQUIRED_MESSAGE})
    return name.strip()


def _require_id(staff_id: str | None) -> str:
    if not staff_id:
        raise FieldValidationError({"id": "ID is required"})
    return staff_id


class StaffService:
    """Staff members of one tenant. Names are unique within the tenant."""

    def __init__(self, db: AsyncSession, tenant_id: str):
        self.staff = StaffMemberRepository(db, tenant_id)
        self.reservations = ReservationRepository(db, tenant_id)

    async def list_all(self) -> list[StaffMember]:
        return await self.staff.list_all(order_by="name", limit=1000)

    async def get_or_raise(self, staff_id: str) -> StaffMember:
        staff = await self.staff.get(staff_id)
        if staff is None:
            raise ResourceNotFoundError("Staff member")
        return staff

    async def create(self, name: str | None) -> StaffMember:
        name = _clean_name(name)
        if await self.staff.get_by_name(name) is not None:
            raise ConflictError(DUPLICATE_NAME_MESSAGE)
        staff = await self.staff.create(StaffMember(name=name, is_active=True))
        logger.info("staff_member_created", staff_member_id=staff.id)
        return staff

    async def rename(self, staff_id: str | None, name: str | None) -> StaffMember:
        staff_id = _require_id(staff_id)
        name = _clean_name(name)
        staff = await self.get_or_raise(staff_id)
        if await self.staff.get_by_name(name, exclude_id=staff_id) is not None:
            raise ConflictError(DUPLICATE_NAME_MESSAGE)
        return await self.staff.update(staff, {"name": name})

    async def delete(self, staff_id: str | None) -> None:
        """Hard-delete a staff member that has no reservations.

        Raises:
            ConflictError: If any reservation references the staff member
        """
        staff = await self.get_or_raise(_require_id(staff_id))
        if await self.reservations.has_for_staff_member(staff.id):
            raise ConflictError("Cannot delete staff member with existing reservations")
        await self.staff.delete(staff)
        logger.info("staff_member_deleted", staff_member_id=staff.id)
