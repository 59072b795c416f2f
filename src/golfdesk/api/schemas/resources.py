"""Request and response schemas for tenant-owned resources."""

import datetime as dt

from pydantic import BaseModel, ConfigDict


class _ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class TenantOut(_ORMModel):
    id: str
    name: str
    is_active: bool
    created_at: dt.datetime | None = None


class BusinessHourIn(BaseModel):
    day_of_week: int | None = None
    start_time: str | None = None
    end_time: str | None = None


class BusinessHourOut(_ORMModel):
    id: str
    tenant_id: str
    day_of_week: int
    start_time: str
    end_time: str
    is_active: bool


class StaffMemberIn(BaseModel):
    name: str | None = None


class StaffMemberOut(_ORMModel):
    id: str
    tenant_id: str
    name: str
    is_active: bool


class StaffHourIn(BaseModel):
    staff_member_id: str | None = None
    day_of_week: int | None = None
    start_time: str | None = None
    end_time: str | None = None


class StaffHourCopyIn(BaseModel):
    """Copy the tenant's hours of one weekday to a staff member."""

    staff_member_id: str | None = None
    day_of_week: int | None = None


class StaffHourOut(_ORMModel):
    id: str
    tenant_id: str
    staff_member_id: str
    day_of_week: int
    start_time: str
    end_time: str
    is_active: bool


class UserOut(_ORMModel):
    id: str
    tenant_id: str
    user_id: str
    name: str
    phone: str | None = None
    member_type: str
    created_at: dt.datetime | None = None


class UserProfileOut(_ORMModel):
    """What the booking front end may see of a user."""

    user_id: str
    name: str
    phone: str | None = None
    member_type: str


class UserRegisterIn(BaseModel):
    name: str | None = None
    phone: str | None = None


class UserProfileUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""

    name: str | None = None
    phone: str | None = None
    member_type: str | None = None


class ReservationMenuOut(_ORMModel):
    id: str
    name: str
    duration_minutes: int


class ReservationIn(BaseModel):
    """Booking request. Required fields are checked by the booking service."""

    user_id: str | None = None
    name: str | None = None
    datetime: dt.datetime | None = None
    member_type: str | None = None
    note: str | None = None
    phone: str | None = None
    admin_note: str | None = None
    reservation_menu_id: str | None = None
    staff_member_id: str | None = None
    is_admin_mode: bool = False


class ReservationUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""

    staff_member_id: str | None = None
    admin_note: str | None = None


class ReservationOut(_ORMModel):
    id: str
    tenant_id: str
    user_id: str
    name: str
    datetime: dt.datetime
    note: str | None = None
    admin_note: str | None = None
    member_type: str
    reservation_menu_id: str | None = None
    duration_minutes: int
    staff_member_id: str | None = None
    is_created_by_user: bool
    created_at: dt.datetime | None = None
