"""
Structured logging configuration (structlog).

Screening verdicts gate automatic approval, so every decision and every
watchlist change is logged as a key-value event for the audit trail.
JSON output by default; colored console output when explicitly requested
and attached to a terminal.
"""

import logging
import sys

import structlog

from permit_screening.settings import get_settings

_logging_configured = False


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger from settings."""
    settings = get_settings()

    shared_processors = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.log_format == "console" and sys.stderr.isatty():
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True, sort_keys=True)
        ]
    else:
        processors = shared_processors + [
            structlog.processors.JSONRenderer(sort_keys=True)
        ]

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=settings.log_level,
    )

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, configuring logging on first use."""
    global _logging_configured
    if not _logging_configured:
        configure_logging()
        _logging_configured = True
    return structlog.get_logger(name)
