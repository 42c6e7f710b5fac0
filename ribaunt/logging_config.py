"""
Structured logging configuration using structlog.

JSON lines when ``RIBAUNT_LOG_FORMAT=json``, colored console output otherwise.
Logs go to stdout. Puzzles, tokens and the signing secret are never logged.
"""

import logging
import sys

import structlog

from ribaunt.config import settings


def setup_logging() -> None:
    """
    Configure structlog and the stdlib logging bridge.

    Call this once at application startup.
    """
    level = getattr(logging, settings.log_level.upper())

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and slowapi log through stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

