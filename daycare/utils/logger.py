"""Logging utilities for the application.

Every module logs through structlog; this module owns the processor chain so
API handlers, services and the LLM adapter all emit the same JSON lines.
"""

import logging
import os
import sys

import structlog
from structlog.stdlib import BoundLogger

_configured = False


def configure_logger(level: int | None = None) -> None:
    """Configure structlog with JSON output and an ISO timestamp.

    The level defaults to INFO, or DEBUG when LOG_LEVEL=DEBUG is set in the
    environment. Repeated calls are ignored unless an explicit level is given.
    """
    global _configured
    if _configured and level is None:
        return

    if level is None:
        level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> BoundLogger:
    """Get a configured structlog logger bound to ``name``."""
    configure_logger()
    return structlog.get_logger(name)
