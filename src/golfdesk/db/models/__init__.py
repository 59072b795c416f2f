"""Database models for golfdesk."""

from .admin import AdminUser
from .base import Base, TenantOwnedMixin, TimestampMixin
from .business_hour import BusinessHour
from .reservation import DEFAULT_DURATION_MINUTES, Reservation, ReservationMenu
from .staff import StaffMember
from .staff_hour import StaffMemberBusinessHour
from .tenant import Tenant
from .user import MemberType, User

__all__ = [
    "Base",
    "TimestampMixin",
    "TenantOwnedMixin",
    "Tenant",
    "AdminUser",
    "User",
    "MemberType",
    "StaffMember",
    "StaffMemberBusinessHour",
    "BusinessHour",
    "ReservationMenu",
    "Reservation",
    "DEFAULT_DURATION_MINUTES",
]
