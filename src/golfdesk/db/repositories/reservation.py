"""Repositories for reservations and the reservation menu."""

from datetime import datetime

from golfdesk.db.models.reservation import Reservation, ReservationMenu
from golfdesk.db.repositories.base import TenantScopedRepository


class ReservationMenuRepository(TenantScopedRepository[ReservationMenu]):
    model = ReservationMenu

    async def first(self) -> ReservationMenu | None:
        """The tenant's earliest menu item, used as the default lesson."""
        stmt = self._select().order_by(ReservationMenu.created_at, ReservationMenu.id).limit(1)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class ReservationRepository(TenantScopedRepository[Reservation]):
    model = Reservation

    async def list_filtered(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        staff_member_id: str | None = None,
        unassigned_only: bool = False,
        descending: bool = True,
        limit: int = 500,
    ) -> list[Reservation]:
        """Reservations ordered by start time, optionally bounded to ``[start, end]``."""
        stmt = self._select()
        if start is not None:
            stmt = stmt.where(Reservation.datetime >= start)
        if end is not None:
            stmt = stmt.where(Reservation.datetime <= end)
        if unassigned_only:
            stmt = stmt.where(Reservation.staff_member_id.is_(None))
        elif staff_member_id is not None:
            stmt = stmt.where(Reservation.staff_member_id == staff_member_id)
        order = Reservation.datetime.desc() if descending else Reservation.datetime
        stmt = stmt.order_by(order).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_upcoming_for_user(self, user_id: str, now: datetime) -> list[Reservation]:
        stmt = (
            self._select()
            .where(Reservation.user_id == user_id, Reservation.datetime >= now)
            .order_by(Reservation.datetime)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def find_for_user_at(self, user_id: str, at: datetime) -> Reservation | None:
        stmt = self._select().where(
            Reservation.user_id == user_id, Reservation.datetime == at
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def has_for_staff_member(self, staff_member_id: str) -> bool:
        stmt = self._select().where(Reservation.staff_member_id == staff_member_id).limit(1)
        result = await self.db.execute(stmt)
        return result.scalars().first() is not None

    async def list_before(self, at: datetime, *, limit: int) -> list[Reservation]:
        """Latest reservations strictly before ``at``, newest first."""
        stmt = (
            self._select()
            .where(Reservation.datetime < at)
            .order_by(Reservation.datetime.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_from(self, at: datetime, *, limit: int) -> list[Reservation]:
        """Earliest reservations at or after ``at``, soonest first."""
        stmt = (
            self._select()
            .where(Reservation.datetime >= at)
            .order_by(Reservation.datetime)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
