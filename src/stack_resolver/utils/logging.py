"""Structured logging configuration.

This module provides logging configuration for stack-resolver:
- Configurable log levels and output formats (JSON/console)
- Context injection for correlation
- File and console output support
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from pathlib import Path
from typing import Any, cast

import structlog
from structlog.typing import WrappedLogger


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def truncate_log_value(value: Any, limit: int = 200) -> Any:
    """Recursively shorten long strings in log values.

    Raw error text and embedded source can be very large; log entries
    only need enough of it to identify the input.

    Args:
        value: Value to shorten (can be nested dict/list/str)
        limit: Maximum string length kept

    Returns:
        Value with long strings cut to ``limit`` characters plus an ellipsis
    """
    if isinstance(value, str):
        return value if len(value) <= limit else value[:limit] + "..."
    elif isinstance(value, dict):
        return {k: truncate_log_value(v, limit) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return type(value)(truncate_log_value(v, limit) for v in value)
    else:
        return value


def value_truncator(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor that truncates oversized values in log entries.

    Args:
        logger: Logger instance (unused)
        method_name: Log method name (unused)
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with long strings truncated
    """
    # exc_info and stack traces must stay whole
    preserved = {k: event_dict[k] for k in ("exception", "stack") if k in event_dict}
    result = cast(MutableMapping[str, Any], truncate_log_value(dict(event_dict)))
    result.update(preserved)
    return result


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Add contextual information to all log entries.

    Adds standard fields for correlation and debugging:
    - service: Always "stack-resolver"
    - version: Current application version (if available)

    Args:
        logger: Logger instance (unused)
        method_name: Log method name (unused)
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with added context
    """
    event_dict["service"] = "stack-resolver"

    try:
        from stack_resolver._version import __version__

        event_dict["version"] = __version__
    except (ImportError, RuntimeError):
        pass

    return event_dict


def configure_logging(
    level: LogLevel | str = LogLevel.WARNING,
    log_format: LogFormat | str = LogFormat.CONSOLE,
    file_path: Path | str | None = None,
    file_enabled: bool = False,
) -> None:
    """Configure structured logging for the application.

    This function sets up structlog with:
    - Appropriate processors for the output format
    - Truncation of oversized values
    - Context injection
    - Optional file output

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        file_path: Path to log file (if file logging enabled)
        file_enabled: Whether to enable file logging

    Example:
        # For development (colored console output)
        configure_logging(level="DEBUG", log_format="console")

        # For log aggregation
        configure_logging(level="INFO", log_format="json")
    """
    if isinstance(level, str):
        level = LogLevel(level.upper())
    if isinstance(log_format, str):
        log_format = LogFormat(log_format.lower())

    numeric_level = getattr(logging, level.value)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        value_truncator,
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == LogFormat.JSON:
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True, exception_formatter=structlog.dev.plain_traceback
            )
        )

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []

    # Logs go to stderr; stdout carries resolved frames
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    handlers.append(console_handler)

    if file_enabled and file_path:
        try:
            file_path = Path(file_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(file_path)
            file_handler.setLevel(numeric_level)
            handlers.append(file_handler)
        except OSError as e:
            console_logger = logging.getLogger("stack_resolver.logging")
            console_logger.warning(f"Could not create log file {file_path}: {e}")

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str | None = None) -> WrappedLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (defaults to caller's module)

    Returns:
        Configured structlog logger
    """
    return cast(WrappedLogger, structlog.get_logger(name))


def bind_context(**kwargs: Any) -> None:
    """Bind contextual variables for all subsequent log calls.

    Args:
        **kwargs: Key-value pairs to bind

    Example:
        bind_context(invocation_id="3f2a")
        log.info("stack_parsed")  # Includes invocation_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove contextual variables.

    Args:
        *keys: Keys to unbind
    """
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound contextual variables."""
    structlog.contextvars.clear_contextvars()


class LogEventNames:
    """Standard log event names for consistency."""

    # Pipeline
    RESOLVE_STARTED = "resolve_started"
    RESOLVE_COMPLETE = "resolve_complete"
    RESOLVE_SUPERSEDED = "resolve_superseded"
    INPUT_REJECTED = "input_rejected"

    # Parsing
    STACK_PARSED = "stack_parsed"
    STACK_LINE_SKIPPED = "stack_line_skipped"

    # Matching
    SOURCE_MAP_MATCHED = "source_map_matched"
    SOURCE_MAP_NOT_MATCHED = "source_map_not_matched"

    # Resolution
    MAPPING_FOUND = "mapping_found"
    MAPPING_NOT_FOUND = "mapping_not_found"
    FRAME_RESOLVE_ERROR = "frame_resolve_error"

    # Decode cache
    DECODE_CACHE_HIT = "decode_cache_hit"
    DECODE_CACHE_MISS = "decode_cache_miss"
    DOCUMENT_DECODED = "document_decoded"
    DOCUMENT_DECODE_ERROR = "document_decode_error"

    # Document loading
    DOCUMENT_LOADED = "document_loaded"
    DOCUMENT_SKIPPED = "document_skipped"
