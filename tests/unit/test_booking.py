"""Unit tests for the booking services."""

from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from golfdesk.booking import (
    BusinessHourService,
    ReservationService,
    StaffHourService,
    StaffService,
    UserService,
)
from golfdesk.booking.hours import overlaps, to_minutes
from golfdesk.booking.reservations import as_utc
from golfdesk.core.exceptions import (
    ConflictError,
    FieldValidationError,
    ResourceNotFoundError,
)
from golfdesk.db.models import ReservationMenu
from golfdesk.db.repositories import ReservationMenuRepository, UserRepository

AT = datetime(2030, 5, 1, 10, 0, tzinfo=UTC)


class TestTimeHelpers:
    def test_to_minutes(self):
        assert to_minutes("09:30") == 570
        assert to_minutes("24:00") is None
        assert to_minutes("9:30") is None

    def test_touching_windows_do_not_overlap(self):
        assert not overlaps(540, 600, 600, 660)
        assert overlaps(540, 601, 600, 660)

    def test_as_utc(self):
        jst = timezone(timedelta(hours=9))
        assert as_utc(datetime(2030, 5, 1, 19, 0, tzinfo=jst)) == AT
        assert as_utc(datetime(2030, 5, 1, 10, 0)).tzinfo is UTC


class TestBusinessHourService:
    async def test_create_and_list(self, db_session, tenant):
        service = BusinessHourService(db_session, tenant.id)
        await service.create(1, "13:00", "18:00")
        await service.create(1, "09:00", "12:00")

        hours = await service.list_active()

        assert [(h.start_time, h.end_time) for h in hours] == [("09:00", "12:00"), ("13:00", "18:00")]

    @pytest.mark.parametrize("day", [None, -1, 7])
    async def test_invalid_day(self, db_session, tenant, day):
        with pytest.raises(FieldValidationError) as exc_info:
            await BusinessHourService(db_session, tenant.id).create(day, "09:00", "10:00")
        assert exc_info.value.errors == {"day_of_week": "Invalid day_of_week. Must be 0-6."}

    async def test_missing_times(self, db_session, tenant):
        with pytest.raises(FieldValidationError) as exc_info:
            await BusinessHourService(db_session, tenant.id).create(0, "09:00", None)
        assert "time" in exc_info.value.errors

    @pytest.mark.parametrize(
        "start,end",
        [("08:00", "10:00"), ("17:00", "18:30"), ("12:00", "12:00"), ("13:00", "11:00"), ("9am", "10:00")],
    )
    async def test_invalid_range(self, db_session, tenant, start, end):
        with pytest.raises(FieldValidationError) as exc_info:
            await BusinessHourService(db_session, tenant.id).create(0, start, end)
        assert "time_range" in exc_info.value.errors

    async def test_overlap_is_conflict(self, db_session, tenant):
        service = BusinessHourService(db_session, tenant.id)
        await service.create(2, "10:00", "12:00")

        with pytest.raises(ConflictError, match="10:00-12:00"):
            await service.create(2, "11:00", "13:00")

        # Other days and adjacent windows are fine
        await service.create(3, "11:00", "13:00")
        await service.create(2, "12:00", "13:00")

    async def test_deactivate(self, db_session, tenant):
        service = BusinessHourService(db_session, tenant.id)
        hour = await service.create(4, "10:00", "12:00")

        await service.deactivate(hour.id)

        assert await service.list_active() == []
        # A deactivated window no longer blocks its slot
        await service.create(4, "10:00", "12:00")

    async def test_deactivate_requires_id_in_tenant(self, db_session, tenant, other_tenant):
        other_hour = await BusinessHourService(db_session, other_tenant.id).create(0, "10:00", "11:00")
        service = BusinessHourService(db_session, tenant.id)

        with pytest.raises(FieldValidationError):
            await service.deactivate(None)
        with pytest.raises(ResourceNotFoundError):
            await service.deactivate(other_hour.id)


class TestStaffService:
    async def test_create_trims_name(self, db_session, tenant):
        staff = await StaffService(db_session, tenant.id).create("  Sato  ")
        assert staff.name == "Sato"

    @pytest.mark.parametrize("name", [None, "", "   "])
    async def test_name_required(self, db_session, tenant, name):
        with pytest.raises(FieldValidationError) as exc_info:
            await StaffService(db_session, tenant.id).create(name)
        assert "name" in exc_info.value.errors

    async def test_duplicate_name_in_same_tenant(self, db_session, tenant, other_tenant):
        await StaffService(db_session, tenant.id).create("Sato")

        with pytest.raises(ConflictError):
            await StaffService(db_session, tenant.id).create("Sato")
        # Same name in another tenant is allowed
        await StaffService(db_session, other_tenant.id).create("Sato")

    async def test_rename(self, db_session, tenant):
        service = StaffService(db_session, tenant.id)
        sato = await service.create("Sato")
        await service.create("Suzuki")

        assert (await service.rename(sato.id, "Sato Jr")).name == "Sato Jr"
        assert (await service.rename(sato.id, "Sato Jr")).name == "Sato Jr"
        with pytest.raises(ConflictError):
            await service.rename(sato.id, "Suzuki")

    async def test_delete_blocked_by_reservations(self, db_session, tenant):
        staff_service = StaffService(db_session, tenant.id)
        staff = await staff_service.create("Sato")
        await ReservationService(db_session, tenant.id).create(
            user_id="U1", name="Taro", at=AT, member_type="guest", staff_member_id=staff.id
        )

        with pytest.raises(ConflictError):
            await staff_service.delete(staff.id)

    async def test_delete(self, db_session, tenant):
        service = StaffService(db_session, tenant.id)
        staff = await service.create("Sato")

        await service.delete(staff.id)

        assert await service.list_all() == []
        with pytest.raises(ResourceNotFoundError):
            await service.delete(staff.id)


class TestReservationService:
    async def test_public_booking_creates_guest_user(self, db_session, tenant):
        reservation = await ReservationService(db_session, tenant.id).create(
            user_id="U1", name="Taro", at=AT, member_type="guest", phone=" 090-0000-0000 "
        )

        assert reservation.tenant_id == tenant.id
        assert reservation.is_created_by_user is True
        assert reservation.duration_minutes == 30
        user = await UserRepository(db_session, tenant.id).get_by_user_id("U1")
        assert user.phone == "090-0000-0000"

    async def test_regular_members_are_not_created(self, db_session, tenant):
        await ReservationService(db_session, tenant.id).create(
            user_id="U2", name="Hanako", at=AT, member_type="regular"
        )
        assert await UserRepository(db_session, tenant.id).get_by_user_id("U2") is None

    async def test_admin_booking(self, db_session, tenant):
        reservation = await ReservationService(db_session, tenant.id).create(
            user_id="admin_walkin",
            name="Walk-in",
            at=AT,
            member_type="regular",
            admin_note="Paid at desk",
            admin_mode=True,
        )

        assert reservation.is_created_by_user is False
        assert reservation.admin_note == "Paid at desk"
        assert await UserRepository(db_session, tenant.id).get_by_user_id("admin_walkin") is not None

    async def test_public_booking_drops_admin_note(self, db_session, tenant):
        reservation = await ReservationService(db_session, tenant.id).create(
            user_id="U1", name="Taro", at=AT, member_type="guest", admin_note="sneaky"
        )
        assert reservation.admin_note is None

    async def test_admin_console_keeps_note_outside_admin_mode(self, db_session, tenant):
        reservation = await ReservationService(db_session, tenant.id).create(
            user_id="U1", name="Taro", at=AT, member_type="guest",
            admin_note="Paid at desk", keep_admin_note=True,
        )
        assert reservation.admin_note == "Paid at desk"
        assert reservation.is_created_by_user is True

    async def test_failed_insert_leaves_no_guest_user(self, db_session, tenant):
        tenant_id = tenant.id
        service = ReservationService(db_session, tenant_id)
        failure = IntegrityError("INSERT INTO reservations", {}, Exception("constraint"))

        with patch.object(service.reservations, "create", AsyncMock(side_effect=failure)):
            with pytest.raises(IntegrityError):
                await service.create(user_id="U7", name="Nana", at=AT, member_type="guest")
        await db_session.rollback()

        assert await UserRepository(db_session, tenant_id).get_by_user_id("U7") is None

    async def test_booking_and_guest_commit_once(self, db_session, tenant):
        service = ReservationService(db_session, tenant.id)

        with patch.object(db_session, "commit", wraps=db_session.commit) as commit:
            await service.create(user_id="U8", name="Hachi", at=AT, member_type="guest")

        assert commit.await_count == 1

    async def test_missing_fields(self, db_session, tenant):
        with pytest.raises(FieldValidationError) as exc_info:
            await ReservationService(db_session, tenant.id).create(
                user_id="U1", name="", at=AT, member_type="guest"
            )
        assert exc_info.value.errors == {
            "fields": "Missing required fields: user_id, name, datetime, member_type"
        }

    async def test_duration_from_menu(self, db_session, tenant):
        menus = ReservationMenuRepository(db_session, tenant.id)
        service = ReservationService(db_session, tenant.id)
        await menus.create(ReservationMenu(name="Trial", duration_minutes=50))
        default = await service.create(
            user_id="U1", name="Taro", at=AT + timedelta(hours=2), member_type="guest"
        )

        long_lesson = await menus.create(ReservationMenu(name="Long", duration_minutes=80))
        chosen = await service.create(
            user_id="U1", name="Taro", at=AT, member_type="guest",
            reservation_menu_id=long_lesson.id,
        )

        assert chosen.duration_minutes == 80
        assert default.duration_minutes == 50

    async def test_foreign_staff_and_menu_rejected_together(self, db_session, tenant, other_tenant):
        foreign_staff = await StaffService(db_session, other_tenant.id).create("Suzuki")
        foreign_menu = await ReservationMenuRepository(db_session, other_tenant.id).create(
            ReservationMenu(name="Other", duration_minutes=60)
        )

        with pytest.raises(FieldValidationError) as exc_info:
            await ReservationService(db_session, tenant.id).create(
                user_id="U1", name="Taro", at=AT, member_type="guest",
                staff_member_id=foreign_staff.id,
                reservation_menu_id=foreign_menu.id,
            )

        assert set(exc_info.value.errors) == {"staff_member_id", "reservation_menu_id"}

    async def test_duplicate_booking(self, db_session, tenant):
        service = ReservationService(db_session, tenant.id)
        await service.create(user_id="U1", name="Taro", at=AT, member_type="guest")

        with pytest.raises(ConflictError, match="already have a reservation"):
            await service.create(
                user_id="U1",
                name="Taro",
                at=AT.astimezone(timezone(timedelta(hours=9))),
                member_type="guest",
            )

    async def test_list_upcoming(self, db_session, tenant):
        service = ReservationService(db_session, tenant.id)
        await service.create(user_id="U1", name="Taro", at=AT, member_type="guest")
        await service.create(user_id="U1", name="Taro", at=AT - timedelta(days=2), member_type="guest")
        await service.create(user_id="U9", name="Jiro", at=AT, member_type="guest")

        upcoming = await service.list_upcoming("U1", now=AT - timedelta(days=1))

        assert len(upcoming) == 1
        with pytest.raises(FieldValidationError):
            await service.list_upcoming(None)

    async def test_list_for_admin_filters(self, db_session, tenant):
        staff = await StaffService(db_session, tenant.id).create("Sato")
        service = ReservationService(db_session, tenant.id)
        await service.create(
            user_id="U1", name="Taro", at=AT, member_type="guest", staff_member_id=staff.id
        )
        await service.create(user_id="U2", name="Jiro", at=AT + timedelta(days=1), member_type="guest")

        assert len(await service.list_for_admin(staff_member_id="all")) == 2
        assert [r.user_id for r in await service.list_for_admin(staff_member_id="unassigned")] == ["U2"]
        assert [r.user_id for r in await service.list_for_admin(staff_member_id=staff.id)] == ["U1"]
        assert [r.user_id for r in await service.list_for_admin(start=AT + timedelta(hours=1))] == ["U2"]

    async def test_assign_and_clear(self, db_session, tenant):
        staff = await StaffService(db_session, tenant.id).create("Sato")
        service = ReservationService(db_session, tenant.id)
        reservation = await service.create(user_id="U1", name="Taro", at=AT, member_type="guest")

        assigned = await service.assign(reservation.id, {"staff_member_id": staff.id, "admin_note": "VIP"})
        assert assigned.staff_member_id == staff.id
        assert assigned.admin_note == "VIP"

        cleared = await service.assign(reservation.id, {"staff_member_id": ""})
        assert cleared.staff_member_id is None
        assert cleared.admin_note == "VIP"

    async def test_assign_rejects_foreign_staff(self, db_session, tenant, other_tenant):
        foreign_staff = await StaffService(db_session, other_tenant.id).create("Suzuki")
        service = ReservationService(db_session, tenant.id)
        reservation = await service.create(user_id="U1", name="Taro", at=AT, member_type="guest")

        with pytest.raises(FieldValidationError):
            await service.assign(reservation.id, {"staff_member_id": foreign_staff.id})

    async def test_cancel_is_confined_to_tenant(self, db_session, tenant, other_tenant):
        foreign = await ReservationService(db_session, other_tenant.id).create(
            user_id="U1", name="Taro", at=AT, member_type="guest"
        )
        service = ReservationService(db_session, tenant.id)

        with pytest.raises(ResourceNotFoundError):
            await service.cancel(foreign.id)
        with pytest.raises(FieldValidationError):
            await service.cancel("")

        await ReservationService(db_session, other_tenant.id).cancel(foreign.id)

    async def test_recent_mixes_past_and_upcoming(self, db_session, tenant):
        service = ReservationService(db_session, tenant.id)
        for days in (-3, -1, 2, 5):
            await service.create(
                user_id="U1", name="Taro", at=AT + timedelta(days=days), member_type="guest"
            )

        nearest = await service.recent(limit=3, now=AT)

        assert [r.datetime.replace(tzinfo=UTC) - AT for r in nearest] == [
            timedelta(days=-1),
            timedelta(days=2),
            timedelta(days=-3),
        ]
        assert len(await service.recent(limit=100, now=AT)) == 4


async def _open_monday(db_session, tenant_id: str) -> str:
    hours = BusinessHourService(db_session, tenant_id)
    await hours.create(1, "09:00", "12:00")
    await hours.create(1, "13:00", "18:00")
    staff = await StaffService(db_session, tenant_id).create("Sato")
    return staff.id


class TestStaffHourService:
    async def test_create_inside_tenant_hours(self, db_session, tenant):
        staff_id = await _open_monday(db_session, tenant.id)
        service = StaffHourService(db_session, tenant.id)

        hour = await service.create(staff_id, 1, "13:30", "18:00")

        assert hour.tenant_id == tenant.id
        assert [h.id for h in await service.list_active(staff_id)] == [hour.id]

    @pytest.mark.parametrize(
        ("start", "end"),
        [("08:30", "10:00"), ("11:00", "13:30"), ("12:00", "12:30"), ("11:00", "10:00")],
    )
    async def test_rejects_windows_outside_tenant_hours(self, db_session, tenant, start, end):
        staff_id = await _open_monday(db_session, tenant.id)

        with pytest.raises(FieldValidationError) as exc_info:
            await StaffHourService(db_session, tenant.id).create(staff_id, 1, start, end)

        assert set(exc_info.value.errors) == {"time_range"}

    async def test_touching_windows_are_allowed(self, db_session, tenant):
        staff_id = await _open_monday(db_session, tenant.id)
        service = StaffHourService(db_session, tenant.id)
        await service.create(staff_id, 1, "09:00", "10:00")

        await service.create(staff_id, 1, "10:00", "11:00")
        with pytest.raises(ConflictError):
            await service.create(staff_id, 1, "10:30", "11:30")

    async def test_foreign_staff_is_not_found(self, db_session, tenant, other_tenant):
        foreign_staff = await _open_monday(db_session, other_tenant.id)
        await BusinessHourService(db_session, tenant.id).create(1, "09:00", "18:00")

        with pytest.raises(ResourceNotFoundError):
            await StaffHourService(db_session, tenant.id).create(foreign_staff, 1, "10:00", "11:00")

    async def test_copy_tenant_hours_replaces_day(self, db_session, tenant):
        staff_id = await _open_monday(db_session, tenant.id)
        service = StaffHourService(db_session, tenant.id)
        old = await service.create(staff_id, 1, "10:00", "11:00")

        copies = await service.copy_tenant_hours(staff_id, 1)

        assert [(h.start_time, h.end_time) for h in copies] == [("09:00", "12:00"), ("13:00", "18:00")]
        assert old.is_active is False
        assert len(await service.list_active(staff_id)) == 2

    async def test_copy_commits_once(self, db_session, tenant):
        staff_id = await _open_monday(db_session, tenant.id)
        service = StaffHourService(db_session, tenant.id)
        await service.create(staff_id, 1, "10:00", "11:00")

        with patch.object(db_session, "commit", wraps=db_session.commit) as commit:
            await service.copy_tenant_hours(staff_id, 1)

        assert commit.await_count == 1

    async def test_published_hours_need_at_least_one_window(self, db_session, tenant):
        staff_id = await _open_monday(db_session, tenant.id)

        with pytest.raises(ResourceNotFoundError):
            await StaffHourService(db_session, tenant.id).list_published(staff_id)
        with pytest.raises(FieldValidationError):
            await StaffHourService(db_session, tenant.id).list_published(None)


class TestUserService:
    async def test_register_is_idempotent(self, db_session, tenant):
        service = UserService(db_session, tenant.id)

        first = await service.register("U1", " Taro ", " 090 ")
        second = await service.register("U1", "Someone else")

        assert first.id == second.id
        assert second.name == "Taro"
        assert second.phone == "090"
        assert second.member_type == "guest"

    async def test_update_only_given_fields(self, db_session, tenant):
        service = UserService(db_session, tenant.id)
        await service.register("U1", "Taro", "090")

        user = await service.update_profile("U1", {"member_type": "regular"})

        assert user.member_type == "regular"
        assert user.name == "Taro"
        assert user.phone == "090"

    async def test_update_errors_are_collected(self, db_session, tenant):
        with pytest.raises(FieldValidationError) as exc_info:
            await UserService(db_session, tenant.id).update_profile(
                "U1", {"name": " ", "member_type": "vip"}
            )

        assert set(exc_info.value.errors) == {"name", "member_type"}

    async def test_profiles_are_per_tenant(self, db_session, tenant, other_tenant):
        await UserService(db_session, tenant.id).register("U1", "Taro")

        assert await UserService(db_session, other_tenant.id).find("U1") is None
        with pytest.raises(ResourceNotFoundError):
            await UserService(db_session, other_tenant.id).update_profile("U1", {"name": "X"})
