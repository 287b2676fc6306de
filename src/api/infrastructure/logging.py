"""Structlog configuration for the reservations service.

Console rendering is used when a human is watching (TTY or ``FORCE_COLOR``),
JSON lines everywhere else so log shippers can parse probe events.
"""

import logging
import os
import sys

import structlog


def _wants_colors() -> bool:
    # FORCE_COLOR=1 enables colors in non-TTY environments such as containers
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    return force_color or sys.stdout.isatty()


def configure_logging(debug: bool = False) -> None:
    """Configure structlog processors and the minimum log level.

    Args:
        debug: Emit debug-level probe events (role lookups, list queries,
            subscriber bookkeeping). Info and above otherwise.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if _wants_colors():
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    min_level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
