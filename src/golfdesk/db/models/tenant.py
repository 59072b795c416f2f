"""Tenant model for multi-tenancy support."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, new_id


class Tenant(TimestampMixin, Base):
    """Tenant (customer organization) in the system.

    Every other table references a tenant. Tenants are deactivated by
    clearing ``is_active`` and never hard-deleted while referenced.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name})>"
