"""Structured logging for exception-dispatch.

This module provides structured logging functions backed by structlog. Events
are rendered as key/value pairs and handed to the standard library logger
named ``exception_dispatch``, so the host application's logging configuration
decides levels and destinations.

Example:
    >>> from exception_dispatch import log_info, log_error
    >>>
    >>> log_info("Dispatch table built", {
    ...     "container": "GlobalAdvice",
    ...     "mappings": 4
    ... })
    >>>
    >>> try:
    ...     build()
    ... except ConfigurationError as e:
    ...     log_error(f"Build failed: {e}", e.metadata)
"""

from __future__ import annotations

import logging as _stdlib_logging
from typing import Any

import structlog

from .types import LogContext

LOGGER_NAME = "exception_dispatch"

_logger = structlog.wrap_logger(
    _stdlib_logging.getLogger(LOGGER_NAME),
    wrapper_class=structlog.stdlib.BoundLogger,
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
    ],
)


def log_error(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an ERROR level message with structured fields.

    Use this for declaration defects that abort construction.

    Args:
        message: The log message.
        fields: Optional structured fields for context. Can be a dict
                or a LogContext instance.
    """
    _logger.error(message, **(_normalize_fields(fields) or {}))


def log_warn(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a WARN level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _logger.warning(message, **(_normalize_fields(fields) or {}))


def log_info(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an INFO level message with structured fields.

    Use this for lifecycle events such as a dispatch table being built.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _logger.info(message, **(_normalize_fields(fields) or {}))


def log_debug(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a DEBUG level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _logger.debug(message, **(_normalize_fields(fields) or {}))


def log_trace(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a TRACE level message with structured fields.

    The standard library has no TRACE level, so these are emitted at DEBUG
    with ``level_hint=trace``. Use this for per-lookup detail.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _logger.debug(message, level_hint="trace", **(_normalize_fields(fields) or {}))


def _normalize_fields(
    fields: dict[str, Any] | LogContext | None,
) -> dict[str, str] | None:
    """Normalize fields to a dict of strings.

    Args:
        fields: Input fields as dict, LogContext, or None.

    Returns:
        Dict with string values, or None if no fields.
    """
    if fields is None:
        return None

    if isinstance(fields, LogContext):
        # Convert LogContext to dict, excluding None values
        return {k: str(v) for k, v in fields.model_dump().items() if v is not None}

    return {k: str(v) for k, v in fields.items()}


__all__ = [
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
