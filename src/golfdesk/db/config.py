"""Database configuration and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from golfdesk.config.settings import Settings, get_settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build an async engine for the configured database URL."""
    kwargs: dict = {"echo": settings.DEBUG}
    # SQLite picks its own pool class and rejects pool sizing arguments
    if settings.DATABASE_URL.startswith("sqlite"):
        return create_async_engine(settings.DATABASE_URL, **kwargs)

    if settings.ENVIRONMENT == "test":
        kwargs["poolclass"] = NullPool
    else:
        kwargs["pool_size"] = settings.DATABASE_POOL_SIZE
        kwargs["max_overflow"] = settings.DATABASE_MAX_OVERFLOW
        kwargs["pool_pre_ping"] = True
    return create_async_engine(settings.DATABASE_URL, **kwargs)


def get_engine(settings: Settings | None = None) -> AsyncEngine:
    """Get the process-wide engine, creating it on first use."""
    global _engine, _session_factory
    if _engine is None:
        _engine = create_engine_from_settings(settings or get_settings())
        _session_factory = async_sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory bound to the process-wide engine."""
    get_engine()
    assert _session_factory is not None
    return _session_factory


async def init_db(settings: Settings | None = None) -> None:
    """Initialize the connection pool and verify connectivity.

    Called during application startup so the first request does not pay
    for connection setup.
    """
    engine = get_engine(settings)
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db() -> None:
    """Dispose of all pooled connections. Called during shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Context manager for obtaining a session outside dependency injection.

    Usage:
        async with get_async_session() as session:
            result = await session.execute(query)
    """
    async with get_session_factory()() as session:
        yield session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI to inject database sessions.

    Usage:
        @router.get("/items")
        async def get_items(db: Annotated[AsyncSession, Depends(get_db)]):
            ...
    """
    async with get_session_factory()() as session:
        yield session
