"""Reservation booking and administration.

Both the public booking flow and the administrator's manual booking go
through ``ReservationService.create``; ``admin_mode`` only changes who is
recorded as the creator and how missing users are provisioned. A booking and
the guest user it provisions are committed together.
"""

import math
from datetime import UTC, datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from golfdesk.core.exceptions import (
    ConflictError,
    FieldValidationError,
    ResourceNotFoundError,
)
from golfdesk.core.validation import ValidationErrors
from golfdesk.db.models.reservation import DEFAULT_DURATION_MINUTES, Reservation
from golfdesk.db.models.user import MemberType, User
from golfdesk.db.repositories.reservation import (
    ReservationMenuRepository,
    ReservationRepository,
)
from golfdesk.db.repositories.staff import StaffMemberRepository
from golfdesk.db.repositories.user import UserRepository

logger = structlog.get_logger("golfdesk.booking.reservations")

ADMIN_USER_PREFIX = "admin_"
UNASSIGNED_FILTER = "unassigned"
ALL_FILTER = "all"

MISSING_FIELDS_MESSAGE = "Missing required fields: user_id, name, datetime, member_type"
DUPLICATE_MESSAGE = "You already have a reservation at this time"
MAX_RECENT = 20


def as_utc(value: datetime) -> datetime:
    """Normalize to an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class ReservationService:
    """Reservations of one tenant."""

    def __init__(self, db: AsyncSession, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id
        self.reservations = ReservationRepository(db, tenant_id)
        self.menus = ReservationMenuRepository(db, tenant_id)
        self.staff = StaffMemberRepository(db, tenant_id)
        self.users = UserRepository(db, tenant_id)

    async def list_for_admin(
        self,
        *,
        staff_member_id: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Reservation]:
        """Newest first. ``staff_member_id`` may be ``all`` or ``unassigned``."""
        unassigned = staff_member_id == UNASSIGNED_FILTER
        if staff_member_id in (ALL_FILTER, UNASSIGNED_FILTER, ""):
            staff_member_id = None
        return await self.reservations.list_filtered(
            start=as_utc(start) if start else None,
            end=as_utc(end) if end else None,
            staff_member_id=staff_member_id,
            unassigned_only=unassigned,
        )

    async def list_upcoming(self, user_id: str | None, now: datetime | None = None) -> list[Reservation]:
        """A booking user's future reservations, soonest first."""
        if not user_id:
            raise FieldValidationError({"user_id": "user_id parameter is required"})
        return await self.reservations.list_upcoming_for_user(
            user_id, as_utc(now or datetime.now(UTC))
        )

    async def recent(self, limit: int = 5, now: datetime | None = None) -> list[Reservation]:
        """Reservations closest to ``now`` on either side, nearest first.

        Up to half of ``limit`` (rounded up) is taken from each side before
        the merged list is cut to ``limit``, which is capped at 20.
        """
        limit = min(limit, MAX_RECENT)
        now = as_utc(now or datetime.now(UTC))
        per_side = math.ceil(limit / 2)
        past = await self.reservations.list_before(now, limit=per_side)
        upcoming = await self.reservations.list_from(now, limit=per_side)
        nearest = sorted(past + upcoming, key=lambda r: abs(as_utc(r.datetime) - now))
        return nearest[:limit]

    async def get_or_raise(self, reservation_id: str | None) -> Reservation:
        if not reservation_id:
            raise FieldValidationError({"id": "Reservation ID is required"})
        reservation = await self.reservations.get(reservation_id)
        if reservation is None:
            raise ResourceNotFoundError("Reservation")
        return reservation

    async def create(
        self,
        *,
        user_id: str | None,
        name: str | None,
        at: datetime | None,
        member_type: str | None,
        note: str | None = None,
        admin_note: str | None = None,
        phone: str | None = None,
        reservation_menu_id: str | None = None,
        staff_member_id: str | None = None,
        admin_mode: bool = False,
        keep_admin_note: bool = False,
    ) -> Reservation:
        """Book a lesson.

        The lesson length comes from the chosen menu, else the tenant's first
        menu, else the default of 30 minutes. ``admin_note`` is stored in admin
        mode or when ``keep_admin_note`` is set by the administrative API.

        Raises:
            FieldValidationError: On missing fields, or a staff member or menu
                that is not part of this tenant
            ConflictError: If the user already has a reservation at ``at``
        """
        if not user_id or not name or at is None or not member_type:
            raise FieldValidationError({"fields": MISSING_FIELDS_MESSAGE})
        at = as_utc(at)

        errors = ValidationErrors()
        if staff_member_id and await self.staff.get(staff_member_id) is None:
            errors.add("staff_member_id", "Invalid staff member")

        duration = DEFAULT_DURATION_MINUTES
        if reservation_menu_id:
            menu = await self.menus.get(reservation_menu_id)
            if menu is None:
                errors.add("reservation_menu_id", "Invalid reservation menu")
        else:
            menu = await self.menus.first()
        errors.raise_if_any()
        if menu is not None:
            duration = menu.duration_minutes

        if await self.reservations.find_for_user_at(user_id, at) is not None:
            raise ConflictError(DUPLICATE_MESSAGE)

        await self._ensure_user(
            user_id=user_id,
            name=name,
            phone=phone,
            member_type=member_type,
            admin_mode=admin_mode,
        )

        reservation = await self.reservations.create(
            Reservation(
                user_id=user_id,
                name=name,
                datetime=at,
                note=note,
                admin_note=admin_note if admin_mode or keep_admin_note else None,
                member_type=member_type,
                reservation_menu_id=menu.id if menu is not None else None,
                duration_minutes=duration,
                staff_member_id=staff_member_id or None,
                is_created_by_user=not admin_mode,
            ),
            commit=False,
        )
        await self.db.commit()
        logger.info(
            "reservation_created",
            reservation_id=reservation.id,
            admin_mode=admin_mode,
            duration_minutes=duration,
        )
        return reservation

    async def assign(
        self,
        reservation_id: str | None,
        updates: dict[str, str | None],
    ) -> Reservation:
        """Update the assigned staff member and/or the administrator note.

        Only keys present in ``updates`` are changed; an empty value clears
        the field.

        Raises:
            FieldValidationError: If the id is missing or the staff member is
                not part of this tenant
            ResourceNotFoundError: If the reservation is not in this tenant
        """
        reservation = await self.get_or_raise(reservation_id)

        changes: dict[str, str | None] = {}
        if "staff_member_id" in updates:
            staff_member_id = updates["staff_member_id"] or None
            if staff_member_id and await self.staff.get(staff_member_id) is None:
                raise FieldValidationError({"staff_member_id": "Invalid staff member"})
            changes["staff_member_id"] = staff_member_id
        if "admin_note" in updates:
            changes["admin_note"] = updates["admin_note"] or None

        if not changes:
            return reservation
        return await self.reservations.update(reservation, changes)

    async def cancel(self, reservation_id: str | None) -> None:
        reservation = await self.get_or_raise(reservation_id)
        await self.reservations.delete(reservation)
        logger.info("reservation_deleted", reservation_id=reservation.id)

    async def _ensure_user(
        self,
        *,
        user_id: str,
        name: str,
        phone: str | None,
        member_type: str,
        admin_mode: bool,
    ) -> User | None:
        """Create the booking user on first booking.

        Guests are created by the public flow; administrators create users
        whose id carries the ``admin_`` prefix. Anyone else must already exist.
        The new row is only flushed; the caller commits.
        """
        if admin_mode:
            if not user_id.startswith(ADMIN_USER_PREFIX):
                return None
        elif member_type != MemberType.GUEST.value:
            return None

        existing = await self.users.get_by_user_id(user_id)
        if existing is not None:
            return existing

        user = await self.users.create(
            User(
                user_id=user_id,
                name=name,
                phone=phone.strip() if phone and phone.strip() else None,
                member_type=member_type,
            ),
            commit=False,
        )
        logger.info("booking_user_created", user_id=user_id, member_type=member_type)
        return user
