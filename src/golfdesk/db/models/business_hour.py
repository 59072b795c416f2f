"""Weekly business hours."""

from sqlalchemy import SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TenantOwnedMixin, TimestampMixin, new_id


class BusinessHour(TenantOwnedMixin, TimestampMixin, Base):
    """Opening window on one weekday.

    Times are stored as ``HH:MM`` strings; ``day_of_week`` is 0 (Sunday) to 6.
    """

    __tablename__ = "business_hours"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    day_of_week: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
