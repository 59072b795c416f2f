"""Database repositories for tenant-scoped data access."""

from .admin import AdminUserRepository
from .base import BaseRepository, TenantScopedRepository
from .business_hour import BusinessHourRepository
from .reservation import ReservationMenuRepository, ReservationRepository
from .staff import StaffMemberRepository
from .staff_hour import StaffMemberBusinessHourRepository
from .tenant import TenantRepository
from .user import UserRepository

__all__ = [
    "BaseRepository",
    "TenantScopedRepository",
    "TenantRepository",
    "AdminUserRepository",
    "BusinessHourRepository",
    "StaffMemberRepository",
    "StaffMemberBusinessHourRepository",
    "UserRepository",
    "ReservationMenuRepository",
    "ReservationRepository",
]
