"""Structured logging setup for Listmark."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_logging(verbose: bool = False) -> None:
    """
    Configure structlog for key-value console logging to stderr.

    The level comes from the LISTMARK_LOG_LEVEL environment variable (default
    WARNING); `verbose` forces DEBUG. Output goes to stderr so it never mixes with
    document text written to stdout.

    Example:
        LISTMARK_LOG_LEVEL=DEBUG listmark --toggle 3 todo.md
    """
    level_name = "DEBUG" if verbose else os.environ.get("LISTMARK_LOG_LEVEL", "WARNING").upper()
    if level_name not in _VALID_LEVELS:
        level_name = "WARNING"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name)),
        context_class=dict,
        # Resolve sys.stderr on each use so redirected streams are honored.
        logger_factory=lambda *args: structlog.PrintLogger(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def ensure_logging() -> None:
    """Apply the default setup unless the host application configured structlog itself."""
    if not structlog.is_configured():
        configure_logging()


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("lines_renumbered", start=1, end=12, changed=3)
    """
    ensure_logging()
    return structlog.get_logger(name)
