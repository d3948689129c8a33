"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
Events go to stderr so stdout stays reserved for the report line.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog processors and level filtering.

    Args:
        level: Minimum level name, e.g. ``info``.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_LEVELS.get(level, logging.INFO)),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger bound to the module name.
    """
    return structlog.get_logger(name)


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    # Resolve sys.stderr per call so redirected streams are honored.
    return structlog.PrintLogger(file=sys.stderr)


configure_logging()
