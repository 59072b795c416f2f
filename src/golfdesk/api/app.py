"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from golfdesk import __version__
from golfdesk.api.errors import register_error_handlers
from golfdesk.api.middleware import (
    AdminAuthorizationMiddleware,
    AuthorizationConfig,
    ErrorHandlingMiddleware,
    RequestContextMiddleware,
    RequestLoggingMiddleware,
)
from golfdesk.api.routers import admin_router, auth_router, health_router, public_router
from golfdesk.config.settings import Settings, get_settings
from golfdesk.config.validation import get_configuration_summary, validate_or_raise
from golfdesk.core.logging import setup_logging
from golfdesk.core.session import (
    SessionVerifier,
    build_session_verifier,
    build_signed_verifier,
)
from golfdesk.db.config import close_db, init_db

logger = structlog.get_logger("golfdesk.api")


def create_app(
    settings: Settings | None = None,
    session_verifier: SessionVerifier | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)
        session_verifier: Optional verifier override; by default the signed
            JWT verifier, followed by the demo-user verifier when
            ``DEV_AUTH_ENABLED`` is set

    Example:
        # Production
        uvicorn golfdesk.api.app:create_app --factory

        # Testing
        app = create_app(Settings(ENVIRONMENT="test", SESSION_SECRET_KEY="..."))
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="golfdesk API",
        description="Multi-tenant golf lesson booking API",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=_lifespan,
    )

    signer = build_signed_verifier(settings)
    if session_verifier is None:
        session_verifier = build_session_verifier(settings, signed=signer)

    app.state.settings = settings
    app.state.session_signer = signer
    app.state.session_verifier = session_verifier

    _configure_middleware(app, settings, session_verifier)
    register_error_handlers(app)
    _configure_routers(app)

    return app


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging, check configuration and open the database pool."""
    settings: Settings = app.state.settings
    setup_logging(settings)
    validate_or_raise(settings)

    logger.info("app_starting", version=__version__, **get_configuration_summary(settings))
    await init_db(settings)
    logger.info("database_initialized")

    yield

    logger.info("app_stopping")
    await close_db()


def _configure_middleware(
    app: FastAPI,
    settings: Settings,
    session_verifier: SessionVerifier,
) -> None:
    """Configure middleware stack.

    Middleware order (outermost to innermost execution):
    1. RequestLoggingMiddleware - Logs all requests
    2. ErrorHandlingMiddleware - Converts exceptions to envelope responses
    3. CORSMiddleware - Handles CORS (if configured)
    4. AdminAuthorizationMiddleware - Verifies sessions, guards admin routes
    5. RequestContextMiddleware - Sets ContextVar for request context

    Starlette runs the last-added middleware outermost, so they are added
    in reverse.
    """
    app.add_middleware(RequestContextMiddleware)

    app.add_middleware(
        AdminAuthorizationMiddleware,
        verifier=session_verifier,
        config=AuthorizationConfig.from_settings(settings),
    )

    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)


def _configure_routers(app: FastAPI) -> None:
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(admin_router)
    app.include_router(public_router)
