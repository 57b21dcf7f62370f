"""Structured logging setup for applications embedding the client."""

import logging
import sys

import structlog

from pezesha.core.config import get_settings


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    The client only emits events through structlog; calling this is
    left to the host application.

    Args:
        level: Log level name, defaults to PEZESHA_LOG_LEVEL
        log_format: "json" or "console", defaults to PEZESHA_LOG_FORMAT
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    log_format = log_format or settings.log_format

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
