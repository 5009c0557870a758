"""Utility functions and helpers.

This module provides various utilities for stack-resolver:
- async_helpers: Error hierarchy and cooperative cancellation
- logging: Structured logging configuration
"""

from stack_resolver.utils.async_helpers import (
    CancellationToken,
    DocumentDecodeError,
    InputError,
    ResolverError,
)
from stack_resolver.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)

__all__ = [
    # Errors
    "CancellationToken",
    "DocumentDecodeError",
    "InputError",
    # Logging
    "LogEventNames",
    "LogFormat",
    "LogLevel",
    "ResolverError",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
]
