"""
Logging Configuration for the Sales Analytics API

structlog events and stdlib records (uvicorn, SQLAlchemy) share one stdout
handler, rendered as JSON lines or as console output.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import ProcessorFormatter, add_log_level

from sales_analytics.config.settings import get_settings

# Third-party loggers routed through the application handler
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
DATABASE_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg")

_shared_processors = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    add_log_level,
    TimeStamper(fmt="iso", utc=True),
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _build_handler(log_format: str, level: int) -> logging.Handler:
    if log_format == "json":
        renderer = JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ProcessorFormatter(processor=renderer, foreign_pre_chain=_shared_processors))
    return handler


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structured logging for the API and the snapshot loader.

    Args:
        log_level: Override LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)
        log_format: Override LOG_FORMAT ("json" or "text")
    """
    settings = get_settings()
    level_name = (log_level or settings.monitoring.log_level).upper()
    fmt = log_format or settings.monitoring.log_format
    level = getattr(logging, level_name, logging.INFO)

    structlog.configure(
        processors=_shared_processors + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = _build_handler(fmt, level)
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.propagate = False
        server_logger.setLevel(level)

    # Driver chatter stays at WARNING unless SQL echo is on
    database_level = logging.INFO if settings.database.echo else max(level, logging.WARNING)
    for name in DATABASE_LOGGERS:
        logging.getLogger(name).setLevel(database_level)

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level_name,
        format=fmt,
        environment=settings.app_env,
    )


def get_logger(name: str):
    """Get a logger instance with the given name."""
    return structlog.get_logger(name)
