"""Provisioning commands for tenants and administrators.

Examples:
  python -m golfdesk.cli create-tenant "Shibuya Golf Studio"
  python -m golfdesk.cli create-admin <tenant_id> admin 's3cret-pass' "Studio Manager"
  python -m golfdesk.cli list-admins
  python -m golfdesk.cli deactivate-tenant <tenant_id>
  python -m golfdesk.cli reset-password admin
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence

import structlog
from sqlalchemy.exc import IntegrityError

from golfdesk.config.settings import get_settings
from golfdesk.core.auth import create_admin, reset_password
from golfdesk.core.exceptions import FieldValidationError, ResourceNotFoundError
from golfdesk.core.logging import setup_logging
from golfdesk.core.tenant import TenantService
from golfdesk.db.config import close_db, get_async_session, get_engine
from golfdesk.db.models import Base
from golfdesk.db.repositories.admin import AdminUserRepository

logger = structlog.get_logger("golfdesk.cli")


async def _create_tables() -> None:
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Tables created")


async def _create_tenant(args: argparse.Namespace) -> None:
    async with get_async_session() as session:
        tenant = await TenantService(session).create_tenant(args.name, tenant_id=args.id)
    print(f"Created tenant {tenant.name} ({tenant.id})")


async def _list_tenants(args: argparse.Namespace) -> None:
    async with get_async_session() as session:
        tenants = await TenantService(session).list_tenants(active_only=not args.all)
    if not tenants:
        print("No tenants found")
        return
    for tenant in tenants:
        state = "active" if tenant.is_active else "inactive"
        print(f"{tenant.id}  {tenant.name}  [{state}]")


async def _deactivate_tenant(args: argparse.Namespace) -> None:
    async with get_async_session() as session:
        tenant = await TenantService(session).deactivate_tenant(args.tenant_id)
    print(f"Deactivated tenant {tenant.name} ({tenant.id})")


async def _create_admin(args: argparse.Namespace) -> None:
    async with get_async_session() as session:
        if await TenantService(session).get_active_tenant(args.tenant_id) is None:
            raise ResourceNotFoundError("Active tenant")
        admin = await create_admin(
            session,
            tenant_id=args.tenant_id,
            username=args.username,
            password=args.password,
            name=args.name,
        )
    print(f"Created admin @{admin.username} for tenant {admin.tenant_id}")
    print("Login at: /admin/login")


async def _list_admins(args: argparse.Namespace) -> None:
    async with get_async_session() as session:
        repo = AdminUserRepository(session)
        if args.tenant:
            admins = await repo.list_for_tenant(args.tenant)
        else:
            admins = await repo.list_all(order_by="username", limit=1000)
    if not admins:
        print("No admin users found")
        return
    for admin in admins:
        print(f"@{admin.username}  {admin.name}  tenant={admin.tenant_id}")


async def _delete_admin(args: argparse.Namespace) -> None:
    async with get_async_session() as session:
        repo = AdminUserRepository(session)
        admin = await repo.get_by_username(args.username)
        if admin is None:
            raise ResourceNotFoundError("Admin user")
        await repo.delete(admin)
    print(f"Deleted admin @{args.username}")


async def _reset_password(args: argparse.Namespace) -> None:
    async with get_async_session() as session:
        admin, password = await reset_password(session, args.username, args.password)
    print(f"Password reset for @{admin.username}")
    if args.password is None:
        print(f"Temporary password: {password}")


COMMANDS = {
    "init-db": lambda args: _create_tables(),
    "create-tenant": _create_tenant,
    "list-tenants": _list_tenants,
    "deactivate-tenant": _deactivate_tenant,
    "create-admin": _create_admin,
    "list-admins": _list_admins,
    "delete-admin": _delete_admin,
    "reset-password": _reset_password,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="golfdesk",
        description="golfdesk tenant and administrator provisioning",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1] if __doc__ else None,
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    subparsers.add_parser("init-db", help="Create all tables (development only)")

    tenant_parser = subparsers.add_parser("create-tenant", help="Create a tenant")
    tenant_parser.add_argument("name", help="Display name")
    tenant_parser.add_argument("--id", help="Explicit tenant id (default: generated UUID)")

    list_tenants_parser = subparsers.add_parser("list-tenants", help="List tenants")
    list_tenants_parser.add_argument(
        "--all", action="store_true", help="Include inactive tenants"
    )

    deactivate_parser = subparsers.add_parser("deactivate-tenant", help="Deactivate a tenant")
    deactivate_parser.add_argument("tenant_id")

    admin_parser = subparsers.add_parser("create-admin", help="Create an administrator")
    admin_parser.add_argument("tenant_id", help="Id of an active tenant")
    admin_parser.add_argument("username", help="Unique login name")
    admin_parser.add_argument("password", help="At least 8 characters")
    admin_parser.add_argument("name", help="Display name")

    list_admins_parser = subparsers.add_parser("list-admins", help="List administrators")
    list_admins_parser.add_argument("--tenant", help="Only administrators of this tenant")

    delete_admin_parser = subparsers.add_parser("delete-admin", help="Delete an administrator")
    delete_admin_parser.add_argument("username")

    reset_parser = subparsers.add_parser("reset-password", help="Reset an administrator password")
    reset_parser.add_argument("username")
    reset_parser.add_argument("--password", help="New password (default: generated)")

    return parser


async def _run(args: argparse.Namespace) -> None:
    try:
        await COMMANDS[args.command](args)
    finally:
        await close_db()


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(get_settings(), log_level="WARNING")

    try:
        asyncio.run(_run(args))
    except FieldValidationError as e:
        for field, message in e.errors.items():
            print(f"Error: {field}: {message}", file=sys.stderr)
        return 1
    except ResourceNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except IntegrityError as e:
        logger.debug("integrity_error", error=str(e.orig))
        print("Error: conflicts with existing data (duplicate id or username?)", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
