"""Administrator password handling and credential checks."""

import secrets

import bcrypt
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from golfdesk.core.exceptions import (
    AuthenticationError,
    FieldValidationError,
    ResourceNotFoundError,
)
from golfdesk.core.validation import ValidationErrors
from golfdesk.db.models.admin import AdminUser
from golfdesk.db.repositories.admin import AdminUserRepository
from golfdesk.db.repositories.tenant import TenantRepository

logger = structlog.get_logger("golfdesk.auth")

MIN_PASSWORD_LENGTH = 8
BCRYPT_ROUNDS = 12


def hash_password(plain: str) -> str:
    hashed = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Check a password against a bcrypt hash. A malformed hash never matches."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("password_hash_malformed")
        return False


async def authenticate_admin(db: AsyncSession, username: str, password: str) -> AdminUser:
    """Check administrator credentials.

    The administrator's tenant must still be active; a deactivated tenant
    locks out its administrators.

    Raises:
        AuthenticationError: If the username is unknown, the password is wrong
            or the tenant is inactive. The reason is logged, never returned.
    """
    admin = await AdminUserRepository(db).get_by_username(username)
    if admin is None or not verify_password(password, admin.password_hash):
        logger.info("admin_login_rejected", username=username, reason="bad_credentials")
        raise AuthenticationError("Invalid username or password")

    if await TenantRepository(db).get_active(admin.tenant_id) is None:
        logger.info("admin_login_rejected", username=username, reason="tenant_inactive")
        raise AuthenticationError("Tenant is inactive")

    return admin


async def create_admin(
    db: AsyncSession,
    *,
    tenant_id: str,
    username: str,
    password: str,
    name: str,
) -> AdminUser:
    """Provision an administrator for an existing tenant.

    Raises:
        FieldValidationError: If the password is too short
        IntegrityError: If the username is taken or the tenant does not exist
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise FieldValidationError(
            {"password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}
        )
    admin = AdminUser(
        tenant_id=tenant_id,
        username=username,
        name=name,
        password_hash=hash_password(password),
    )
    admin = await AdminUserRepository(db).create(admin)
    logger.info("admin_created", username=username, tenant_id=tenant_id)
    return admin


async def change_password(
    db: AsyncSession,
    admin: AdminUser,
    *,
    current_password: str,
    new_password: str,
    confirm_password: str,
) -> AdminUser:
    """Change an administrator's password after re-checking the current one.

    Raises:
        FieldValidationError: Keyed by the offending field
    """
    errors = ValidationErrors()
    if not current_password:
        errors.add("currentPassword", "Current password is required")
    if not new_password:
        errors.add("newPassword", "New password is required")
    elif len(new_password) < MIN_PASSWORD_LENGTH:
        errors.add("newPassword", f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not confirm_password:
        errors.add("confirmPassword", "Password confirmation is required")
    elif new_password and new_password != confirm_password:
        errors.add("confirmPassword", "Passwords do not match")
    errors.raise_if_any()

    if not verify_password(current_password, admin.password_hash):
        raise FieldValidationError({"currentPassword": "Current password is incorrect"})

    admin = await AdminUserRepository(db).update(
        admin, {"password_hash": hash_password(new_password)}
    )
    logger.info("admin_password_changed", username=admin.username)
    return admin


async def reset_password(
    db: AsyncSession, username: str, new_password: str | None = None
) -> tuple[AdminUser, str]:
    """Set a new password without the current one; operator use only.

    A random temporary password is generated when none is given.

    Returns:
        The administrator and the password now in effect

    Raises:
        FieldValidationError: If the given password is too short
        ResourceNotFoundError: If no administrator has ``username``
    """
    if new_password is None:
        new_password = secrets.token_urlsafe(12)
    elif len(new_password) < MIN_PASSWORD_LENGTH:
        raise FieldValidationError(
            {"password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}
        )

    repo = AdminUserRepository(db)
    admin = await repo.get_by_username(username)
    if admin is None:
        raise ResourceNotFoundError("Admin user")
    admin = await repo.update(admin, {"password_hash": hash_password(new_password)})
    logger.info("admin_password_reset", username=username)
    return admin, new_password
