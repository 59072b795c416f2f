"""Tenant-scoped booking services: business hours, staff, reservations and users."""

from .hours import BusinessHourService
from .reservations import ReservationService
from .staff import StaffService
from .staff_hours import StaffHourService
from .users import UserService

__all__ = [
    "BusinessHourService",
    "ReservationService",
    "StaffHourService",
    "StaffService",
    "UserService",
]
