"""Structured logging configuration for dynreqs.

This module provides structlog-based logging with:
- Pretty console output on stderr (default)
- JSON output for build farms (when env var DYNREQS_LOG_FORMAT=json)
- Context binding for the document or distribution being evaluated

Usage:
    from dynreqs.logging import get_logger, configure_logging

    # Configure logging once at application startup
    configure_logging()

    log = get_logger(__name__)
    log.debug("condition_evaluated", condition="is_os linux", result=True)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
]

# Environment variable for log format
LOG_FORMAT_ENV_VAR = "DYNREQS_LOG_FORMAT"

# Environment variable for log level
LOG_LEVEL_ENV_VAR = "DYNREQS_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


def _get_log_level() -> int:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.WARNING)


def _is_json_output() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _get_shared_processors() -> list[Processor]:
    """Get processors shared between stdlib and structlog records.

    Returns:
        List of common processors for log processing.
    """
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _get_renderer(use_json: bool) -> Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    This should be called once at application startup. Subsequent calls
    reconfigure logging, replacing any handler installed earlier.

    Args:
        force_json: Force JSON output regardless of environment variable.
        level: Override log level. If None, reads from DYNREQS_LOG_LEVEL.

    Example:
        # Default configuration (reads from environment)
        configure_logging()

        # Debug output while diagnosing a condition
        configure_logging(level=logging.DEBUG)
    """
    use_json = force_json or _is_json_output()
    log_level = level if level is not None else _get_log_level()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_get_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Logs go to stderr so stdout stays clean for resolved prerequisites
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _get_renderer(use_json),
            ],
            foreign_pre_chain=_get_shared_processors(),
        )
    )
    root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the caller's module name.

    Returns:
        A bound structlog logger.
    """
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Bind context variables that will be included in all log messages.

    Args:
        **context: Key-value pairs to bind to log context.

    Example:
        bind_context(document="META.json")
        log.info("entry_matched")  # Includes document
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
