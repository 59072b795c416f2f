"""Administrative API.

Every handler acts on the tenant bound to the caller's session; no handler
accepts a tenant identifier from the request.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from starlette import status

from golfdesk.api.dependencies import DbSession, SessionTenant
from golfdesk.api.responses import api_response
from golfdesk.api.schemas.errors import MessageResponse
from golfdesk.api.schemas.resources import (
    BusinessHourIn,
    BusinessHourOut,
    ReservationIn,
    ReservationOut,
    ReservationUpdate,
    StaffHourCopyIn,
    StaffHourIn,
    StaffHourOut,
    StaffMemberIn,
    StaffMemberOut,
    TenantOut,
    UserOut,
)
from golfdesk.booking import (
    BusinessHourService,
    ReservationService,
    StaffHourService,
    StaffService,
    UserService,
)
from golfdesk.core.exceptions import FieldValidationError

router = APIRouter(prefix="/api/admin", tags=["admin"])

IdParam = Annotated[str | None, Query()]


@router.get("/tenants", response_model=TenantOut)
async def get_own_tenant(tenant: SessionTenant) -> TenantOut:
    """The session's tenant. Resolution already guarantees it is active."""
    return TenantOut.model_validate(tenant)


@router.get("/tenants/{tenant_id}", response_model=TenantOut)
async def get_tenant(tenant_id: str, tenant: SessionTenant) -> TenantOut:
    """Only the session's own tenant can be read by id."""
    if tenant_id != tenant.id:
        raise FieldValidationError({"tenant_id": "Access denied to this tenant"})
    return TenantOut.model_validate(tenant)


# Business hours


@router.get("/business-hours", response_model=list[BusinessHourOut])
async def list_business_hours(tenant: SessionTenant, db: DbSession) -> list[BusinessHourOut]:
    hours = await BusinessHourService(db, tenant.id).list_active()
    return [BusinessHourOut.model_validate(h) for h in hours]


@router.post(
    "/business-hours",
    response_model=BusinessHourOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_business_hour(
    body: BusinessHourIn,
    tenant: SessionTenant,
    db: DbSession,
) -> JSONResponse:
    hour = await BusinessHourService(db, tenant.id).create(
        body.day_of_week, body.start_time, body.end_time
    )
    return api_response(BusinessHourOut.model_validate(hour), status.HTTP_201_CREATED)


@router.delete("/business-hours", response_model=MessageResponse)
async def delete_business_hour(
    tenant: SessionTenant,
    db: DbSession,
    id: IdParam = None,
) -> MessageResponse:
    await BusinessHourService(db, tenant.id).deactivate(id)
    return MessageResponse(message="Business hour deleted successfully")


# Staff members


@router.get("/staff-members", response_model=list[StaffMemberOut])
async def list_staff_members(tenant: SessionTenant, db: DbSession) -> list[StaffMemberOut]:
    staff = await StaffService(db, tenant.id).list_all()
    return [StaffMemberOut.model_validate(s) for s in staff]


@router.post(
    "/staff-members",
    response_model=StaffMemberOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_staff_member(
    body: StaffMemberIn,
    tenant: SessionTenant,
    db: DbSession,
) -> JSONResponse:
    staff = await StaffService(db, tenant.id).create(body.name)
    return api_response(StaffMemberOut.model_validate(staff), status.HTTP_201_CREATED)


@router.put("/staff-members", response_model=StaffMemberOut)
async def rename_staff_member(
    body: StaffMemberIn,
    tenant: SessionTenant,
    db: DbSession,
    id: IdParam = None,
) -> StaffMemberOut:
    staff = await StaffService(db, tenant.id).rename(id, body.name)
    return StaffMemberOut.model_validate(staff)


@router.delete("/staff-members", response_model=MessageResponse)
async def delete_staff_member(
    tenant: SessionTenant,
    db: DbSession,
    id: IdParam = None,
) -> MessageResponse:
    await StaffService(db, tenant.id).delete(id)
    return MessageResponse(message="Staff member deleted successfully")


# Staff member business hours


@router.get("/staff-member-business-hours", response_model=list[StaffHourOut])
async def list_staff_hours(
    tenant: SessionTenant,
    db: DbSession,
    staff_member_id: IdParam = None,
) -> list[StaffHourOut]:
    """Hours of one staff member, or of all staff with ``staff_member_id=all``."""
    hours = await StaffHourService(db, tenant.id).list_active(staff_member_id)
    return [StaffHourOut.model_validate(h) for h in hours]


@router.post(
    "/staff-member-business-hours",
    response_model=StaffHourOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_staff_hour(
    body: StaffHourIn,
    tenant: SessionTenant,
    db: DbSession,
) -> JSONResponse:
    hour = await StaffHourService(db, tenant.id).create(
        body.staff_member_id, body.day_of_week, body.start_time, body.end_time
    )
    return api_response(StaffHourOut.model_validate(hour), status.HTTP_201_CREATED)


@router.post(
    "/staff-member-business-hours/bulk-create",
    response_model=list[StaffHourOut],
    status_code=status.HTTP_201_CREATED,
)
async def copy_tenant_hours_to_staff(
    body: StaffHourCopyIn,
    tenant: SessionTenant,
    db: DbSession,
) -> JSONResponse:
    hours = await StaffHourService(db, tenant.id).copy_tenant_hours(
        body.staff_member_id, body.day_of_week
    )
    return api_response(
        [StaffHourOut.model_validate(h) for h in hours], status.HTTP_201_CREATED
    )


@router.delete("/staff-member-business-hours", response_model=MessageResponse)
async def delete_staff_hour(
    tenant: SessionTenant,
    db: DbSession,
    id: IdParam = None,
) -> MessageResponse:
    await StaffHourService(db, tenant.id).deactivate(id)
    return MessageResponse(message="Staff member business hour deleted successfully")


# Booking users


@router.get("/users", response_model=list[UserOut])
async def list_users(tenant: SessionTenant, db: DbSession) -> list[UserOut]:
    users = await UserService(db, tenant.id).list_all()
    return [UserOut.model_validate(u) for u in users]


# Reservations


@router.get("/reservations", response_model=list[ReservationOut])
async def list_reservations(
    tenant: SessionTenant,
    db: DbSession,
    staff_member_id: Annotated[str | None, Query()] = None,
    start_date: Annotated[datetime | None, Query()] = None,
    end_date: Annotated[datetime | None, Query()] = None,
) -> list[ReservationOut]:
    """Newest first. ``staff_member_id`` accepts an id, ``all`` or ``unassigned``."""
    reservations = await ReservationService(db, tenant.id).list_for_admin(
        staff_member_id=staff_member_id,
        start=start_date,
        end=end_date,
    )
    return [ReservationOut.model_validate(r) for r in reservations]


@router.get("/recent-reservations", response_model=list[ReservationOut])
async def list_recent_reservations(
    tenant: SessionTenant,
    db: DbSession,
    limit: Annotated[int, Query(ge=1)] = 5,
) -> list[ReservationOut]:
    """Reservations nearest to now, past and upcoming mixed. ``limit`` is capped at 20."""
    reservations = await ReservationService(db, tenant.id).recent(limit)
    return [ReservationOut.model_validate(r) for r in reservations]


@router.post(
    "/reservations",
    response_model=ReservationOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    body: ReservationIn,
    tenant: SessionTenant,
    db: DbSession,
) -> JSONResponse:
    """Manual booking by an administrator."""
    reservation = await ReservationService(db, tenant.id).create(
        user_id=body.user_id,
        name=body.name,
        at=body.datetime,
        member_type=body.member_type,
        note=body.note,
        admin_note=body.admin_note,
        phone=body.phone,
        reservation_menu_id=body.reservation_menu_id,
        staff_member_id=body.staff_member_id,
        admin_mode=body.is_admin_mode,
        keep_admin_note=True,
    )
    return api_response(ReservationOut.model_validate(reservation), status.HTTP_201_CREATED)


@router.put("/reservations", response_model=ReservationOut)
async def update_reservation(
    body: ReservationUpdate,
    tenant: SessionTenant,
    db: DbSession,
    id: IdParam = None,
) -> ReservationOut:
    reservation = await ReservationService(db, tenant.id).assign(
        id, body.model_dump(exclude_unset=True)
    )
    return ReservationOut.model_validate(reservation)


@router.delete("/reservations", response_model=MessageResponse)
async def delete_reservation(
    tenant: SessionTenant,
    db: DbSession,
    id: IdParam = None,
) -> MessageResponse:
    await ReservationService(db, tenant.id).cancel(id)
    return MessageResponse(message="Reservation deleted successfully")
