"""structlog setup.

Every record, whether it comes from structlog or from stdlib loggers such as
uvicorn's, goes through the same processor chain and ends up as one JSON
object per line in production or a console line elsewhere.
"""
# ruff: noqa: ARG001  # structlog processor signature

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor

from golfdesk.config.settings import Settings, get_settings
from golfdesk.core.context import get_current_context_or_none

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Third-party loggers that get our handler instead of their own
ROUTED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "sqlalchemy")


def add_request_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp request id, tenant id and username onto records logged during a request.

    Fields passed explicitly to the log call win.
    """
    ctx = get_current_context_or_none()
    if ctx is None:
        return event_dict
    for key, value in ctx.to_log_dict().items():
        if value is not None:
            event_dict.setdefault(key, value)
    return event_dict


def drop_color_message_key(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.pop("color_message", None)  # uvicorn duplicate of "event"
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_request_context,
        drop_color_message_key,
        structlog.processors.StackInfoRenderer(),
    ]


def setup_logging(
    settings: Settings | None = None,
    log_level: LogLevel | None = None,
    json_format: bool | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Defaults for level and format (default: global settings)
        log_level: Overrides ``settings.log_level``
        json_format: Overrides the default of JSON in production only
    """
    settings = settings or get_settings()
    level = logging.getLevelName(log_level or settings.log_level)
    if json_format is None:
        json_format = settings.ENVIRONMENT == "production"

    shared = _shared_processors()
    if json_format:
        shared.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in ROUTED_LOGGERS:
        routed = logging.getLogger(name)
        routed.handlers = [handler]
        routed.propagate = False

    # Statement echo stays off unless the engine is created with echo=True
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def level_for_status(status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    return "info"


def log_request_end(
    logger: structlog.stdlib.BoundLogger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """One line per finished request. Client errors log as warnings, server errors as errors."""
    log = getattr(logger, level_for_status(status_code))
    log(
        "request_completed",
        http_method=method,
        http_path=path,
        http_status=status_code,
        duration_ms=round(duration_ms, 2),
        **kwargs,
    )


def log_exception(logger: structlog.stdlib.BoundLogger, exc: Exception, **kwargs: Any) -> None:
    logger.error(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        exc_info=exc,
        **kwargs,
    )
