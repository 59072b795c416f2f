"""Public booking API.

Callers name their tenant in the query string (``?tenant_id=``); the tenant
must exist and be active before any tenant data is read.
"""

from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from starlette import status

from golfdesk.api.dependencies import DbSession, RequestTenant
from golfdesk.api.responses import api_response
from golfdesk.api.schemas.errors import MessageResponse
from golfdesk.api.schemas.resources import (
    BusinessHourOut,
    ReservationIn,
    ReservationMenuOut,
    ReservationOut,
    ReservationUpdate,
    StaffHourOut,
    StaffMemberOut,
    TenantOut,
    UserProfileOut,
    UserProfileUpdate,
    UserRegisterIn,
)
from golfdesk.booking import (
    BusinessHourService,
    ReservationService,
    StaffHourService,
    StaffService,
    UserService,
)
from golfdesk.core.exceptions import ResourceNotFoundError
from golfdesk.core.tenant import TenantService
from golfdesk.db.repositories.reservation import ReservationMenuRepository

router = APIRouter(prefix="/api/public", tags=["public"])


@router.get("/tenants/{tenant_id}", response_model=TenantOut)
async def get_tenant(tenant_id: str, db: DbSession) -> TenantOut:
    """Public tenant profile. Unknown and inactive tenants are both reported as not found."""
    tenant = await TenantService(db).get_active_tenant(tenant_id)
    if tenant is None:
        raise ResourceNotFoundError("Tenant")
    return TenantOut.model_validate(tenant)


@router.get("/business-hours", response_model=list[BusinessHourOut])
async def list_business_hours(tenant: RequestTenant, db: DbSession) -> list[BusinessHourOut]:
    hours = await BusinessHourService(db, tenant.id).list_active()
    return [BusinessHourOut.model_validate(h) for h in hours]


@router.get("/staff-members", response_model=list[StaffMemberOut])
async def list_staff_members(tenant: RequestTenant, db: DbSession) -> list[StaffMemberOut]:
    staff = await StaffService(db, tenant.id).list_all()
    return [StaffMemberOut.model_validate(s) for s in staff]


@router.get("/staff-member-business-hours", response_model=list[StaffHourOut])
async def list_staff_hours(
    tenant: RequestTenant,
    db: DbSession,
    staff_member_id: Annotated[str | None, Query()] = None,
) -> list[StaffHourOut]:
    """Hours of one staff member, or of all staff with ``staff_member_id=all``."""
    hours = await StaffHourService(db, tenant.id).list_published(staff_member_id)
    return [StaffHourOut.model_validate(h) for h in hours]


@router.get("/reservation-menu", response_model=ReservationMenuOut)
async def get_reservation_menu(tenant: RequestTenant, db: DbSession) -> ReservationMenuOut:
    """The tenant's lesson menu (one menu per tenant)."""
    menu = await ReservationMenuRepository(db, tenant.id).first()
    if menu is None:
        raise ResourceNotFoundError("Reservation menu")
    return ReservationMenuOut.model_validate(menu)


@router.get("/reservations", response_model=list[ReservationOut])
async def list_reservations(
    tenant: RequestTenant,
    db: DbSession,
    user_id: Annotated[str | None, Query()] = None,
) -> list[ReservationOut]:
    """A booking user's upcoming reservations, soonest first."""
    reservations = await ReservationService(db, tenant.id).list_upcoming(user_id)
    return [ReservationOut.model_validate(r) for r in reservations]


@router.post(
    "/reservations",
    response_model=ReservationOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    body: ReservationIn,
    tenant: RequestTenant,
    db: DbSession,
) -> JSONResponse:
    reservation = await ReservationService(db, tenant.id).create(
        user_id=body.user_id,
        name=body.name,
        at=body.datetime,
        member_type=body.member_type,
        note=body.note,
        phone=body.phone,
        reservation_menu_id=body.reservation_menu_id,
        staff_member_id=body.staff_member_id,
    )
    return api_response(ReservationOut.model_validate(reservation), status.HTTP_201_CREATED)


@router.put("/reservations", response_model=ReservationOut)
async def update_reservation(
    body: ReservationUpdate,
    tenant: RequestTenant,
    db: DbSession,
    id: Annotated[str | None, Query()] = None,
) -> ReservationOut:
    reservation = await ReservationService(db, tenant.id).assign(
        id, body.model_dump(exclude_unset=True)
    )
    return ReservationOut.model_validate(reservation)


@router.delete("/reservations", response_model=MessageResponse)
async def cancel_reservation(
    tenant: RequestTenant,
    db: DbSession,
    id: Annotated[str | None, Query()] = None,
) -> MessageResponse:
    await ReservationService(db, tenant.id).cancel(id)
    return MessageResponse(message="Reservation deleted successfully")


# Booking user profile


@router.get("/users/{user_id}", response_model=UserProfileOut | None)
async def get_user(user_id: str, tenant: RequestTenant, db: DbSession) -> UserProfileOut | None:
    """The booking user's profile, or ``null`` before their first contact."""
    user = await UserService(db, tenant.id).find(user_id)
    return UserProfileOut.model_validate(user) if user is not None else None


@router.post("/users/{user_id}", response_model=UserProfileOut)
async def register_user(
    user_id: str,
    body: UserRegisterIn,
    tenant: RequestTenant,
    db: DbSession,
) -> UserProfileOut:
    """Create a guest on first contact; an existing user is returned unchanged."""
    user = await UserService(db, tenant.id).register(user_id, body.name, body.phone)
    return UserProfileOut.model_validate(user)


@router.put("/users/{user_id}", response_model=UserProfileOut)
async def update_user(
    user_id: str,
    body: UserProfileUpdate,
    tenant: RequestTenant,
    db: DbSession,
) -> UserProfileOut:
    user = await UserService(db, tenant.id).update_profile(
        user_id, body.model_dump(exclude_unset=True)
    )
    return UserProfileOut.model_validate(user)
