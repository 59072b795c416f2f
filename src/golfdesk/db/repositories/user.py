"""Repository for booking users."""

from golfdesk.db.models.user import User
from golfdesk.db.repositories.base import TenantScopedRepository


class UserRepository(TenantScopedRepository[User]):
    model = User

    async def get_by_user_id(self, user_id: str) -> User | None:
        """Look up a user by external (LINE) user id within this tenant."""
        stmt = self._select().where(User.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
