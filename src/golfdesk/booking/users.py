"""Booking user profiles as seen by the public booking front end."""

from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from golfdesk.core.exceptions import FieldValidationError, ResourceNotFoundError
from golfdesk.core.validation import ValidationErrors
from golfdesk.db.models.user import MemberType, User
from golfdesk.db.repositories.user import UserRepository

logger = structlog.get_logger("golfdesk.booking.users")

MEMBER_TYPE_MESSAGE = 'Invalid member_type. Must be "regular" or "guest"'
PROFILE_FIELDS = ("name", "phone", "member_type")


def _clean_phone(phone: str | None) -> str | None:
    return phone.strip() if phone and phone.strip() else None


class UserService:
    """Booking users of one tenant, keyed by their external user id."""

    def __init__(self, db: AsyncSession, tenant_id: str):
        self.users = UserRepository(db, tenant_id)

    async def list_all(self) -> list[User]:
        return await self.users.list_all(order_by="created_at", descending=True, limit=1000)

    async def find(self, user_id: str) -> User | None:
        return await self.users.get_by_user_id(user_id)

    async def register(self, user_id: str, name: str | None, phone: str | None = None) -> User:
        """Return the existing user, or create a guest on first contact."""
        if not name or not name.strip():
            raise FieldValidationError({"name": "Name is required"})
        existing = await self.users.get_by_user_id(user_id)
        if existing is not None:
            return existing
        user = await self.users.create(
            User(
                user_id=user_id,
                name=name.strip(),
                phone=_clean_phone(phone),
                member_type=MemberType.GUEST.value,
            )
        )
        logger.info("booking_user_registered", user_id=user_id)
        return user

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> User:
        """Apply the given profile fields; keys that are absent stay untouched.

        Raises:
            FieldValidationError: On an unknown member type or a blank name
            ResourceNotFoundError: If the user is not in this tenant
        """
        errors = ValidationErrors()
        member_type = changes.get("member_type")
        if member_type is not None and member_type not in {m.value for m in MemberType}:
            errors.add("member_type", MEMBER_TYPE_MESSAGE)
        if "name" in changes and not (changes["name"] or "").strip():
            errors.add("name", "Name is required")
        errors.raise_if_any()

        user = await self.users.get_by_user_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User")

        updates = {k: v for k, v in changes.items() if k in PROFILE_FIELDS}
        if "name" in updates:
            updates["name"] = updates["name"].strip()
        if "phone" in updates:
            updates["phone"] = _clean_phone(updates["phone"])
        if updates.get("member_type") is None:
            updates.pop("member_type", None)
        if not updates:
            return user
        return await self.users.update(user, updates)
