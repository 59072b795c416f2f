"""Weekly working hours of individual staff members."""

from sqlalchemy import ForeignKey, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TenantOwnedMixin, TimestampMixin, new_id


class StaffMemberBusinessHour(TenantOwnedMixin, TimestampMixin, Base):
    """Window on one weekday in which a staff member takes lessons.

    Always lies inside one of the tenant's business hours for that day.
    """

    __tablename__ = "staff_member_business_hours"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    staff_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
