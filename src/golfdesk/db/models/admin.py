"""Administrator accounts."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TenantOwnedMixin, TimestampMixin, new_id


class AdminUser(TenantOwnedMixin, TimestampMixin, Base):
    """Administrator who manages a single tenant through the admin API."""

    __tablename__ = "admin_users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<AdminUser(username={self.username}, tenant_id={self.tenant_id})>"
