"""Integration tests for the public booking API."""

import pytest
from httpx import AsyncClient

from golfdesk.booking import BusinessHourService
from golfdesk.db.models import ReservationMenu
from golfdesk.db.repositories import ReservationMenuRepository


@pytest.mark.asyncio
class TestTenantResolution:
    @pytest.mark.parametrize("query", ["", "?tenant_id=", "?tenant_id=%20%20"])
    async def test_missing_tenant_id(self, test_client: AsyncClient, tenant, query):
        response = await test_client.get(f"/api/public/business-hours{query}")

        assert response.status_code == 400
        assert response.json() == {
            "error": "Validation failed",
            "details": {"tenant_id": "Tenant ID is required"},
        }

    async def test_unknown_tenant(self, test_client: AsyncClient):
        response = await test_client.get("/api/public/business-hours?tenant_id=nope")

        assert response.status_code == 400
        assert response.json()["details"] == {"tenant": "Invalid or inactive tenant"}

    async def test_inactive_tenant(self, test_client: AsyncClient, inactive_tenant):
        response = await test_client.get(f"/api/public/staff-members?tenant_id={inactive_tenant.id}")

        assert response.status_code == 400
        assert response.json()["details"] == {"tenant": "Invalid or inactive tenant"}

    async def test_legacy_parameter(self, test_client: AsyncClient, tenant):
        response = await test_client.get("/api/public/business-hours?tenantId=t1")
        assert response.status_code == 200

    async def test_session_does_not_choose_public_tenant(
        self, admin_client: AsyncClient, other_tenant
    ):
        response = await admin_client.get("/api/public/staff-members?tenant_id=t2")

        assert response.status_code == 200
        assert response.json() == []

    async def test_tenant_profile(self, test_client: AsyncClient, tenant, inactive_tenant):
        active = await test_client.get("/api/public/tenants/t1")
        inactive = await test_client.get(f"/api/public/tenants/{inactive_tenant.id}")

        assert active.status_code == 200
        assert active.json()["name"] == "Shibuya Golf Studio"
        assert inactive.status_code == 404
        assert inactive.json() == {"error": "Tenant not found"}


@pytest.mark.asyncio
class TestPublicReads:
    async def test_business_hours(self, test_client: AsyncClient, db_session, tenant):
        service = BusinessHourService(db_session, tenant.id)
        await service.create(3, "13:00", "17:00")
        closed = await service.create(4, "10:00", "12:00")
        await service.deactivate(closed.id)

        response = await test_client.get("/api/public/business-hours?tenant_id=t1")

        assert response.status_code == 200
        assert [(h["day_of_week"], h["start_time"]) for h in response.json()] == [(3, "13:00")]

    async def test_reservation_menu(self, test_client: AsyncClient, db_session, tenant):
        missing = await test_client.get("/api/public/reservation-menu?tenant_id=t1")
        assert missing.status_code == 404
        assert missing.json() == {"error": "Reservation menu not found"}

        await ReservationMenuRepository(db_session, tenant.id).create(
            ReservationMenu(name="Trial lesson", duration_minutes=50)
        )
        found = await test_client.get("/api/public/reservation-menu?tenant_id=t1")
        assert found.status_code == 200
        assert found.json()["duration_minutes"] == 50


@pytest.mark.asyncio
class TestPublicReservations:
    BODY = {
        "user_id": "U1",
        "name": "Taro",
        "datetime": "2099-05-01T10:00:00Z",
        "member_type": "guest",
        "note": "First lesson",
    }

    async def test_book_and_list(self, test_client: AsyncClient, tenant):
        created = await test_client.post("/api/public/reservations?tenant_id=t1", json=self.BODY)

        assert created.status_code == 201
        assert created.json()["is_created_by_user"] is True
        assert created.json()["tenant_id"] == "t1"

        listed = await test_client.get("/api/public/reservations?tenant_id=t1&user_id=U1")
        assert [r["id"] for r in listed.json()] == [created.json()["id"]]

        other_user = await test_client.get("/api/public/reservations?tenant_id=t1&user_id=U2")
        assert other_user.json() == []

    async def test_admin_flag_is_ignored(self, test_client: AsyncClient, tenant):
        created = await test_client.post(
            "/api/public/reservations?tenant_id=t1",
            json={**self.BODY, "is_admin_mode": True, "admin_note": "free lesson"},
        )

        assert created.json()["is_created_by_user"] is True
        assert created.json()["admin_note"] is None

    async def test_duplicate(self, test_client: AsyncClient, tenant):
        await test_client.post("/api/public/reservations?tenant_id=t1", json=self.BODY)
        response = await test_client.post("/api/public/reservations?tenant_id=t1", json=self.BODY)

        assert response.status_code == 409

    async def test_missing_fields(self, test_client: AsyncClient, tenant):
        response = await test_client.post(
            "/api/public/reservations?tenant_id=t1", json={"user_id": "U1"}
        )

        assert response.status_code == 400
        assert "fields" in response.json()["details"]

    async def test_list_requires_user_id(self, test_client: AsyncClient, tenant):
        response = await test_client.get("/api/public/reservations?tenant_id=t1")

        assert response.status_code == 400
        assert response.json()["details"] == {"user_id": "user_id parameter is required"}

    async def test_booking_requires_tenant(self, test_client: AsyncClient):
        response = await test_client.post("/api/public/reservations", json=self.BODY)

        assert response.status_code == 400
        assert response.json()["details"] == {"tenant_id": "Tenant ID is required"}

    async def test_update_note(self, test_client: AsyncClient, tenant):
        created = (
            await test_client.post("/api/public/reservations?tenant_id=t1", json=self.BODY)
        ).json()

        response = await test_client.put(
            f"/api/public/reservations?tenant_id=t1&id={created['id']}",
            json={"admin_note": "Bring gloves"},
        )

        assert response.status_code == 200
        assert response.json()["admin_note"] == "Bring gloves"

    async def test_cancel(self, test_client: AsyncClient, tenant):
        created = (
            await test_client.post("/api/public/reservations?tenant_id=t1", json=self.BODY)
        ).json()

        response = await test_client.delete(f"/api/public/reservations?tenant_id=t1&id={created['id']}")
        again = await test_client.delete(f"/api/public/reservations?tenant_id=t1&id={created['id']}")
        without_id = await test_client.delete("/api/public/reservations?tenant_id=t1")

        assert response.status_code == 200
        assert response.json() == {"message": "Reservation deleted successfully"}
        assert (await test_client.get("/api/public/reservations?tenant_id=t1&user_id=U1")).json() == []
        assert again.status_code == 404
        assert without_id.json()["details"] == {"id": "Reservation ID is required"}


@pytest.mark.asyncio
class TestPublicStaffHours:
    async def test_hours_for_one_or_all_staff(
        self, test_client: AsyncClient, admin_client: AsyncClient
    ):
        await admin_client.post(
            "/api/admin/business-hours",
            json={"day_of_week": 2, "start_time": "09:00", "end_time": "18:00"},
        )
        sato = (await admin_client.post("/api/admin/staff-members", json={"name": "Sato"})).json()
        idle = (await admin_client.post("/api/admin/staff-members", json={"name": "Ito"})).json()
        await admin_client.post(
            "/api/admin/staff-member-business-hours",
            json={"staff_member_id": sato["id"], "day_of_week": 2, "start_time": "10:00", "end_time": "12:00"},
        )

        one = await test_client.get(
            f"/api/public/staff-member-business-hours?tenant_id=t1&staff_member_id={sato['id']}"
        )
        everyone = await test_client.get(
            "/api/public/staff-member-business-hours?tenant_id=t1&staff_member_id=all"
        )
        without_hours = await test_client.get(
            f"/api/public/staff-member-business-hours?tenant_id=t1&staff_member_id={idle['id']}"
        )
        without_staff = await test_client.get("/api/public/staff-member-business-hours?tenant_id=t1")

        assert [(h["start_time"], h["end_time"]) for h in one.json()] == [("10:00", "12:00")]
        assert len(everyone.json()) == 1
        assert without_hours.status_code == 404
        assert without_hours.json() == {"error": "Staff business hours not found"}
        assert without_staff.json()["details"] == {"staff_member_id": "Staff member ID is required"}


@pytest.mark.asyncio
class TestPublicUsers:
    async def test_unknown_user_is_null(self, test_client: AsyncClient, tenant):
        response = await test_client.get("/api/public/users/U1?tenant_id=t1")

        assert response.status_code == 200
        assert response.json() is None

    async def test_register_once(self, test_client: AsyncClient, tenant):
        first = await test_client.post(
            "/api/public/users/U1?tenant_id=t1", json={"name": "Taro", "phone": "090-1111-2222"}
        )
        second = await test_client.post("/api/public/users/U1?tenant_id=t1", json={"name": "Renamed"})
        fetched = await test_client.get("/api/public/users/U1?tenant_id=t1")

        assert first.status_code == 200
        assert first.json() == {
            "user_id": "U1",
            "name": "Taro",
            "phone": "090-1111-2222",
            "member_type": "guest",
        }
        assert second.json()["name"] == "Taro"
        assert fetched.json() == first.json()

    async def test_register_requires_name(self, test_client: AsyncClient, tenant):
        response = await test_client.post("/api/public/users/U1?tenant_id=t1", json={})

        assert response.status_code == 400
        assert response.json()["details"] == {"name": "Name is required"}

    async def test_update_profile(self, test_client: AsyncClient, tenant):
        await test_client.post("/api/public/users/U1?tenant_id=t1", json={"name": "Taro"})

        updated = await test_client.put(
            "/api/public/users/U1?tenant_id=t1", json={"phone": "03-1234-5678", "member_type": "regular"}
        )

        assert updated.status_code == 200
        assert updated.json()["name"] == "Taro"
        assert updated.json()["phone"] == "03-1234-5678"
        assert updated.json()["member_type"] == "regular"

    async def test_update_rejects_unknown_member_type(self, test_client: AsyncClient, tenant):
        await test_client.post("/api/public/users/U1?tenant_id=t1", json={"name": "Taro"})

        response = await test_client.put("/api/public/users/U1?tenant_id=t1", json={"member_type": "vip"})

        assert response.status_code == 400
        assert response.json()["details"] == {
            "member_type": 'Invalid member_type. Must be "regular" or "guest"'
        }

    async def test_update_unknown_user(self, test_client: AsyncClient, tenant):
        response = await test_client.put("/api/public/users/U404?tenant_id=t1", json={"name": "Nobody"})

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}
