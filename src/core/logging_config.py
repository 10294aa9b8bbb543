"""Structured logging configuration.

This module initializes structlog with a stable structured format.
Events render as JSON lines on stderr so command output stays clean.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL


class _StderrStream:
    """Writes to whatever ``sys.stderr`` is at call time."""

    def write(self, text: str) -> int:
        return sys.stderr.write(text)

    def flush(self) -> None:
        sys.stderr.flush()


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog processors and the minimum level.

    Args:
        level: Standard level name such as ``INFO`` or ``DEBUG``. Takes effect
            for every logger, including ones that have already emitted events.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        logger_factory=structlog.PrintLoggerFactory(file=_StderrStream()),
        # module loggers are created at import time and must follow later reconfiguration
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with JSON output.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
