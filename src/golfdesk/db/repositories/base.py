"""Base repositories with common CRUD operations.

``BaseRepository`` gives plain async CRUD over one model.
``TenantScopedRepository`` binds a repository to a single tenant: every read
is filtered by ``tenant_id`` and every write is stamped with it, so a caller
holding a scoped repository cannot reach another tenant's rows.

Usage:
    from golfdesk.db.repositories.base import TenantScopedRepository

    class StaffMemberRepository(TenantScopedRepository[StaffMember]):
        model = StaffMember

    repo = StaffMemberRepository(db_session, tenant_id=tenant.id)
    staff = await repo.get(staff_id)  # None if it belongs to another tenant
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from golfdesk.db.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic repository for SQLAlchemy models.

    Attributes:
        model: The model class
        db: The database session
    """

    model: type[ModelType]

    def __init__(self, db: AsyncSession):
        self.db = db

    def _select(self) -> Select:
        """Base statement every read starts from."""
        return select(self.model)

    async def get(self, pk: str) -> ModelType | None:
        """Get a single record by primary key.

        Returns:
            Model instance or None if not found
        """
        stmt = self._select().where(self._get_pk_column() == pk)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(
        self,
        *,
        limit: int = 100,
        offset: int = 0,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[ModelType]:
        """List records with pagination, ordered by ``order_by`` or primary key."""
        stmt = self._select()

        col = getattr(self.model, order_by, None) if order_by else None
        if col is None:
            col = self._get_pk_column()
        stmt = stmt.order_by(col.desc() if descending else col)

        stmt = stmt.limit(limit).offset(offset)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        """Count visible records."""
        stmt = select(func.count()).select_from(self._select().subquery())
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def create(self, obj: ModelType, *, commit: bool = True) -> ModelType:
        """Persist a new record and load its server-generated columns."""
        self._before_write(obj)
        self.db.add(obj)
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def create_many(
        self, objs: Sequence[ModelType], *, commit: bool = True
    ) -> list[ModelType]:
        """Persist several new records."""
        for obj in objs:
            self._before_write(obj)
            self.db.add(obj)

        if commit:
            await self.db.commit()
        else:
            await self.db.flush()
        for obj in objs:
            await self.db.refresh(obj)
        return list(objs)

    async def update(
        self, obj: ModelType, updates: dict[str, Any], *, commit: bool = True
    ) -> ModelType:
        """Update known fields of a record. Unknown keys are ignored."""
        self._before_write(obj)
        for field, value in updates.items():
            if field in self._immutable_fields():
                continue
            if hasattr(obj, field):
                setattr(obj, field, value)

        if commit:
            await self.db.commit()
        else:
            await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType, *, commit: bool = True) -> None:
        """Hard-delete a record."""
        self._before_write(obj)
        await self.db.delete(obj)
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()

    def _before_write(self, obj: ModelType) -> None:
        """Hook for subclasses to check or stamp rows before they are written."""

    def _immutable_fields(self) -> frozenset[str]:
        return frozenset({self._get_pk_column().key})

    def _get_pk_column(self):
        """Get the primary key column for this model.

        Raises:
            ValueError: If no primary key found
        """
        pk_cols = self.model.__mapper__.primary_key
        if not pk_cols:
            raise ValueError(f"No primary key found for {self.model.__name__}")
        return pk_cols[0]


class TenantScopedRepository(BaseRepository[ModelType]):
    """Repository whose reads and writes are confined to one tenant."""

    def __init__(self, db: AsyncSession, tenant_id: str):
        if not tenant_id:
            raise ValueError("tenant_id is required for a tenant-scoped repository")
        super().__init__(db)
        self.tenant_id = tenant_id

    def _select(self) -> Select:
        return select(self.model).where(self.model.tenant_id == self.tenant_id)

    def _before_write(self, obj: ModelType) -> None:
        current = getattr(obj, "tenant_id", None)
        if current is None:
            obj.tenant_id = self.tenant_id
        elif current != self.tenant_id:
            raise PermissionError(
                f"{self.model.__name__} belongs to tenant {current}, "
                f"repository is scoped to {self.tenant_id}"
            )

    def _immutable_fields(self) -> frozenset[str]:
        return super()._immutable_fields() | {"tenant_id"}
