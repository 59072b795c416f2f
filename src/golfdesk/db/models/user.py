"""Booking users (customers who reserve lessons)."""

from enum import Enum

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TenantOwnedMixin, TimestampMixin, new_id


class MemberType(str, Enum):
    """Membership status of a booking user."""

    REGULAR = "regular"
    GUEST = "guest"


class User(TenantOwnedMixin, TimestampMixin, Base):
    """A customer of one tenant, usually identified by a LINE user id."""

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("tenant_id", "user_id", name="uq_users_tenant_user"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    member_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MemberType.GUEST.value
    )
