"""Startup checks for settings that would leave the booking API unsafe or broken.

Usage:
    from golfdesk.config.validation import validate_or_raise

    validate_or_raise(settings)
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from golfdesk.config.settings import Settings, get_settings
from golfdesk.utils.exceptions import ConfigurationError

logger = structlog.get_logger("golfdesk.config")

MIN_SECRET_LENGTH = 32
SUPPORTED_DATABASES = ("postgresql", "sqlite")


class ValidationSeverity(str, Enum):
    ERROR = "error"  # refuse to start
    WARNING = "warning"


@dataclass
class ValidationResult:
    field: str
    severity: ValidationSeverity
    message: str
    suggestion: str | None = None

    def __str__(self) -> str:
        text = f"[{self.severity.value.upper()}] {self.field}: {self.message}"
        if self.suggestion:
            text += f"\n  Suggestion: {self.suggestion}"
        return text


def _error(field: str, message: str, suggestion: str | None = None) -> ValidationResult:
    return ValidationResult(field, ValidationSeverity.ERROR, message, suggestion)


def _warning(field: str, message: str, suggestion: str | None = None) -> ValidationResult:
    return ValidationResult(field, ValidationSeverity.WARNING, message, suggestion)


def _check_database(settings: Settings) -> Iterator[ValidationResult]:
    url = settings.DATABASE_URL
    if not url:
        yield _error("DATABASE_URL", "Database URL is not configured")
    elif not url.startswith(SUPPORTED_DATABASES):
        scheme = url.split(":", 1)[0]
        yield _warning(
            "DATABASE_URL",
            f"Unsupported database scheme: {scheme}",
            "Use a postgresql+asyncpg or sqlite+aiosqlite URL",
        )


def _check_session(settings: Settings) -> Iterator[ValidationResult]:
    secret = settings.SESSION_SECRET_KEY
    if secret is None:
        result = _error if settings.ENVIRONMENT == "production" else _warning
        yield result(
            "SESSION_SECRET_KEY",
            "Session secret key is not configured, admin login is disabled",
            "Generate one with: openssl rand -base64 48",
        )
    elif len(secret.get_secret_value()) < MIN_SECRET_LENGTH:
        yield _warning(
            "SESSION_SECRET_KEY",
            "Session secret key is short",
            f"Use at least {MIN_SECRET_LENGTH} characters",
        )

    if settings.SESSION_MAX_AGE_HOURS <= 0:
        yield _error("SESSION_MAX_AGE_HOURS", "Session lifetime must be positive")


def _check_paths(settings: Settings) -> Iterator[ValidationResult]:
    if not settings.LOGIN_PATH.startswith("/"):
        yield _error("LOGIN_PATH", f"Login path must be absolute: {settings.LOGIN_PATH}")

    for prefix in settings.ADMIN_PATH_PREFIXES:
        if not prefix.startswith("/"):
            yield _error("ADMIN_PATH_PREFIXES", f"Protected prefix must be absolute: {prefix}")

    if not 1 <= settings.API_PORT <= 65535:
        yield _error(
            "API_PORT",
            f"Invalid port number: {settings.API_PORT}",
            "Use a port between 1 and 65535",
        )


def _check_production_safety(settings: Settings) -> Iterator[ValidationResult]:
    production = settings.ENVIRONMENT == "production"

    if production and settings.DEBUG:
        yield _error("DEBUG", "Debug mode must be disabled in production")
    if production and "*" in settings.CORS_ORIGINS:
        yield _error("CORS_ORIGINS", "Wildcard CORS origin not allowed in production")

    if settings.DEV_AUTH_ENABLED:
        if production:
            yield _error("DEV_AUTH_ENABLED", "Development login must be disabled in production")
        if not settings.DEV_TENANT_ID:
            yield _warning(
                "DEV_TENANT_ID",
                "Development login is enabled without a tenant",
                "Set DEV_TENANT_ID to a seeded tenant id",
            )


CHECKS: tuple[Callable[[Settings], Iterator[ValidationResult]], ...] = (
    _check_database,
    _check_session,
    _check_paths,
    _check_production_safety,
)


def validate_configuration(settings: Settings | None = None) -> list[ValidationResult]:
    """Run every startup check and return the problems found, if any."""
    settings = settings or get_settings()
    return [result for check in CHECKS for result in check(settings)]


def validate_or_raise(settings: Settings | None = None) -> None:
    """Log warnings and refuse to continue on errors.

    Raises:
        ConfigurationError: Listing every error found
    """
    results = validate_configuration(settings)

    for result in results:
        if result.severity == ValidationSeverity.WARNING:
            logger.warning("configuration_warning", field=result.field, detail=result.message)

    errors = [str(r) for r in results if r.severity == ValidationSeverity.ERROR]
    if errors:
        raise ConfigurationError("Configuration validation failed:\n" + "\n".join(errors))


def get_configuration_summary(settings: Settings | None = None) -> dict[str, Any]:
    """Settings worth logging at startup. Secrets and the database URL stay out."""
    settings = settings or get_settings()
    return {
        "environment": settings.ENVIRONMENT,
        "debug": settings.DEBUG,
        "log_level": settings.log_level,
        "api_port": settings.API_PORT,
        "cors_origins_count": len(settings.CORS_ORIGINS),
        "session_configured": settings.SESSION_SECRET_KEY is not None,
        "session_max_age_hours": settings.SESSION_MAX_AGE_HOURS,
        "admin_api_unauthorized_mode": settings.ADMIN_API_UNAUTHORIZED_MODE,
        "dev_auth_enabled": settings.DEV_AUTH_ENABLED,
        "line_login_configured": bool(settings.LINE_CHANNEL_ID),
    }
