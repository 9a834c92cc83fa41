"""Structured logging for the API server and the CLI.

Every record is a structlog event dict rendered as one JSON line, or as a
coloured console line in development. Records emitted while serving a
request carry that request's ``correlation_id``.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from shelfbase.core.config import Settings, get_settings

# Third-party loggers that follow the configured level
FOLLOWED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "alembic")


def rename_event_to_message(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["message"] = event_dict.pop("event", "")
    return event_dict


def build_processors(settings: Settings) -> list[Processor]:
    """Processor chain ending in the renderer ``settings`` asks for."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.is_development or settings.log_format == "console":
        return processors + [
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)
        ]
    return processors + [
        structlog.processors.format_exc_info,
        rename_event_to_message,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the standard library root logger.

    SQL statements are logged only when ``db_echo`` is set.
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=not settings.is_development,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    for name in FOLLOWED_LOGGERS:
        logging.getLogger(name).setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a logger whose records carry ``logger=name``."""
    return structlog.get_logger(logger=name or "shelfbase")


def bind_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
