"""Reservations and the lesson menu they are booked against."""

import datetime as dt

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TenantOwnedMixin, TimestampMixin, new_id

DEFAULT_DURATION_MINUTES = 30


class ReservationMenu(TenantOwnedMixin, TimestampMixin, Base):
    """A bookable lesson type with a fixed duration."""

    __tablename__ = "reservation_menu"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_DURATION_MINUTES
    )


class Reservation(TenantOwnedMixin, TimestampMixin, Base):
    """A booked lesson."""

    __tablename__ = "reservations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    datetime: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    member_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reservation_menu_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("reservation_menu.id"), nullable=True
    )
    duration_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_DURATION_MINUTES
    )
    staff_member_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("staff_members.id"), nullable=True
    )
    is_created_by_user: Mapped[bool] = mapped_column(default=True, nullable=False)
