"""Error types and cancellation helpers for the resolution pipeline.

This module provides:
- The exception hierarchy raised by the pipeline
- A cooperative cancellation token used to supersede in-flight calls
"""

from __future__ import annotations

import asyncio

# =============================================================================
# Custom Exceptions
# =============================================================================

USAGE_EXAMPLE = (
    "Supported formats:\n"
    '  - JSON: [{"filename":"file.js","lineno":1,"colno":100}]\n'
    "  - at functionName (file.js:10:5)\n"
    "  - at http://example.com/file.js:10:5\n"
    "  - file.js:10:5"
)


class ResolverError(Exception):
    """Base exception for all stack resolution errors."""


class InputError(ResolverError):
    """The call cannot start: no documents, empty text or no parseable frames.

    Attributes:
        text: The offending input (truncated), if any.
    """

    def __init__(self, message: str, text: str | None = None) -> None:
        super().__init__(f"{message}\n\n{USAGE_EXAMPLE}")
        self.text = text


class DocumentDecodeError(ResolverError):
    """A source map document could not be decoded into a mapping index.

    Attributes:
        document_name: Name of the document that failed.
    """

    def __init__(self, message: str, document_name: str) -> None:
        super().__init__(message)
        self.document_name = document_name


# =============================================================================
# Cancellation Utilities
# =============================================================================


class CancellationToken:
    """Token for cooperative cancellation of async operations.

    Example:
        token = CancellationToken()

        async def worker(token: CancellationToken):
            for frame in frames:
                token.raise_if_cancelled()
                await resolve(frame)

        # Cancel from elsewhere
        token.cancel()
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation has been requested."""
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation."""
        self._cancelled = True
        self._event.set()

    async def wait(self) -> None:
        """Wait until cancellation is requested."""
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        """Raise asyncio.CancelledError if cancelled.

        Use this to create cancellation points in long-running operations.
        """
        if self._cancelled:
            raise asyncio.CancelledError("Operation was superseded")
