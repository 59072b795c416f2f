"""Pytest fixtures for golfdesk tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
import structlog
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from golfdesk.config.settings import Settings
from golfdesk.core.auth import create_admin
from golfdesk.core.session import SignedSessionVerifier
from golfdesk.core.tenant import TenantService
from golfdesk.db.config import get_db
from golfdesk.db.models import AdminUser, Base, Tenant

TEST_SECRET = "test-session-secret-that-is-long-enough-0123456789"
ADMIN_PASSWORD = "correct-horse-battery"


# =============================================================================
# Global state
# =============================================================================


@pytest.fixture(scope="function", autouse=True)
def reset_structlog_after_test():
    """Reset structlog configuration after each test.

    Tests that call setup_logging() modify structlog global state.
    """
    yield
    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """bcrypt at production cost makes every admin fixture slow."""
    monkeypatch.setattr("golfdesk.core.auth.BCRYPT_ROUNDS", 4)


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create settings for API testing."""
    return Settings(
        ENVIRONMENT="test",
        DEBUG=True,
        log_level="DEBUG",
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        SESSION_SECRET_KEY=SecretStr(TEST_SECRET),
        PUBLIC_BASE_URL="http://test",
    )


# =============================================================================
# Database
# =============================================================================


@pytest_asyncio.fixture
async def test_engine():
    """In-memory SQLite engine; StaticPool keeps one connection so tables persist."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def tenant(db_session: AsyncSession) -> Tenant:
    return await TenantService(db_session).create_tenant("Shibuya Golf Studio", tenant_id="t1")


@pytest_asyncio.fixture
async def other_tenant(db_session: AsyncSession) -> Tenant:
    return await TenantService(db_session).create_tenant("Osaka Swing Lab", tenant_id="t2")


@pytest_asyncio.fixture
async def inactive_tenant(db_session: AsyncSession) -> Tenant:
    service = TenantService(db_session)
    await service.create_tenant("Closed Range", tenant_id="t3")
    return await service.deactivate_tenant("t3")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession, tenant: Tenant) -> AdminUser:
    return await create_admin(
        db_session,
        tenant_id=tenant.id,
        username="manager",
        password=ADMIN_PASSWORD,
        name="Studio Manager",
    )


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def test_app(test_settings: Settings, db_session: AsyncSession) -> FastAPI:
    """Create a FastAPI test application bound to the test database session."""
    from golfdesk.api.app import create_app

    app = create_app(settings=test_settings)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def signer(test_app: FastAPI) -> SignedSessionVerifier:
    return test_app.state.session_signer


@pytest_asyncio.fixture
async def test_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for API testing.

    Calls the application directly without network overhead.
    """
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client


@pytest_asyncio.fixture
async def admin_client(
    test_app: FastAPI,
    test_settings: Settings,
    signer: SignedSessionVerifier,
    admin_user: AdminUser,
) -> AsyncGenerator[AsyncClient, None]:
    """Client carrying a valid session cookie for ``admin_user``."""
    token = signer.issue(admin_user.tenant_id, admin_user.username)
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
        cookies={test_settings.SESSION_COOKIE_NAME: token},
    ) as client:
        yield client


@pytest.fixture
def session_client(test_app: FastAPI, test_settings: Settings):
    """Factory for clients that present an arbitrary session token.

    Usage:
        async with session_client(token) as client:
            await client.get("/api/admin/tenants")
    """

    def _make(token: str, app: FastAPI | None = None) -> AsyncClient:
        return AsyncClient(
            transport=ASGITransport(app=app or test_app),
            base_url="http://test",
            cookies={test_settings.SESSION_COOKIE_NAME: token},
        )

    return _make
