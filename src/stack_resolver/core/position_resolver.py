"""Original-position lookup for compiled stack positions.

This module implements:
- DecodeCache: memoized, per-invocation decoding of source map documents
- PositionResolver: the column-fallback search over a decoded index
- Snippet extraction from embedded ``sourcesContent``

Minifiers frequently emit a single mapping per generated line, so an
exact query at the reported column often misses. The resolver tries a
short list of nearby columns (and column 0) before giving up.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from stack_resolver.interfaces.decoder import MappingDecoder
from stack_resolver.models.snippet import SourceSnippet
from stack_resolver.models.sourcemap import MappedPosition, OriginalLocation, SourceMapDocument
from stack_resolver.utils.async_helpers import DocumentDecodeError
from stack_resolver.utils.logging import LogEventNames

log = structlog.get_logger()


class DecodeCache:
    """Decoded indexes for the documents used by one pipeline invocation.

    Each document is decoded at most once. Failures are remembered as
    well, so every later frame that needs a malformed document fails
    fast with the same DocumentDecodeError.

    Example:
        cache = DecodeCache(decoder)
        index = await cache.get(document)
    """

    def __init__(self, decoder: MappingDecoder) -> None:
        """Initialize the cache.

        Args:
            decoder: Decoder used on first access to each document
        """
        self._decoder = decoder
        self._indexes: dict[SourceMapDocument, Any] = {}
        self._failures: dict[SourceMapDocument, DocumentDecodeError] = {}
        # One decode in flight at a time
        self._lock = asyncio.Lock()

    def __contains__(self, document: SourceMapDocument) -> bool:
        return document in self._indexes

    def __len__(self) -> int:
        return len(self._indexes)

    async def get(self, document: SourceMapDocument) -> Any:
        """Return the decoded index for a document, decoding it if needed.

        Args:
            document: Document to decode

        Returns:
            Decoder-specific index

        Raises:
            DocumentDecodeError: If the document cannot be decoded
        """
        async with self._lock:
            if document in self._indexes:
                log.debug(LogEventNames.DECODE_CACHE_HIT, document=document.name)
                return self._indexes[document]

            failure = self._failures.get(document)
            if failure is not None:
                raise failure

            log.debug(LogEventNames.DECODE_CACHE_MISS, document=document.name)

            try:
                index = await asyncio.to_thread(self._decoder.decode, document)
            except DocumentDecodeError as e:
                log.warning(
                    LogEventNames.DOCUMENT_DECODE_ERROR,
                    document=document.name,
                    error=str(e),
                )
                self._failures[document] = e
                raise

            self._indexes[document] = index
            return index


class PositionResolver:
    """Resolves compiled positions against a decoded index.

    Responsibilities:
    - Convert 1-based stack columns to the decoder's 0-based columns
    - Try candidate columns nearest-first
    - Fall back to column 0 on the same line
    - Convert the hit back to 1-based columns

    Example:
        resolver = PositionResolver(decoder)
        location = resolver.resolve(index, line=1, column=50)
        if location:
            print(f"{location.source}:{location.line}:{location.column}")
    """

    def __init__(self, decoder: MappingDecoder) -> None:
        """Initialize the PositionResolver.

        Args:
            decoder: Decoder whose ``query`` is used for lookups
        """
        self._decoder = decoder

    @staticmethod
    def candidate_columns(col0: int) -> list[int]:
        """Columns to try for a 0-based column, nearest first.

        Args:
            col0: The 0-based column reported by the stack

        Returns:
            Distinct non-negative columns ordered by distance from
            ``col0``; ties keep insertion order
        """
        listed = [col0]
        if col0 > 0:
            listed.append(0)
        listed.extend([col0 - 1, col0 - 2, col0 + 1, col0 + 2])

        unique = list(dict.fromkeys(c for c in listed if c >= 0))
        # sorted() is stable, so equal distances keep their listed order
        return sorted(unique, key=lambda c: abs(c - col0))

    def resolve(self, index: Any, line: int, column: int) -> OriginalLocation | None:
        """Find the original location of a compiled position.

        Args:
            index: Decoded index for the matched document
            line: Compiled line (1-based)
            column: Compiled column (1-based, 0 if unknown)

        Returns:
            Original location with 1-based line and column, or None
        """
        query_line = max(1, line)
        col0 = max(0, column - 1)

        for candidate in self.candidate_columns(col0):
            position = self._decoder.query(index, query_line, candidate)
            if position is not None and position.source:
                log.debug(
                    LogEventNames.MAPPING_FOUND,
                    line=query_line,
                    column=col0,
                    matched_column=candidate,
                )
                return self._to_location(position)

        # Last resort: whatever maps the start of the line
        position = self._decoder.query(index, query_line, 0)
        if position is not None and position.source:
            log.debug(
                LogEventNames.MAPPING_FOUND,
                line=query_line,
                column=col0,
                matched_column=0,
            )
            return self._to_location(position)

        log.debug(LogEventNames.MAPPING_NOT_FOUND, line=query_line, column=col0)
        return None

    @staticmethod
    def _to_location(position: MappedPosition) -> OriginalLocation:
        return OriginalLocation(
            source=position.source or "",
            line=position.line,
            column=position.column + 1,
            name=position.name,
        )


def extract_snippet(
    document: SourceMapDocument,
    source: str,
    line_number: int,
    context_lines: int,
) -> SourceSnippet | None:
    """Get embedded source text surrounding a resolved line.

    Args:
        document: The matched source map
        source: Resolved original source path
        line_number: Resolved original line (1-indexed)
        context_lines: Number of lines before/after

    Returns:
        SourceSnippet, or None if the map does not embed this source
    """
    content = document.content_for(source)
    if not content:
        return None

    lines = content.splitlines()
    if not lines:
        return None

    total_lines = len(lines)
    start_line = max(1, line_number - context_lines)
    end_line = min(total_lines, line_number + context_lines)
    if start_line > end_line:
        return None

    return SourceSnippet(
        file_path=source,
        start_line=start_line,
        end_line=end_line,
        content="\n".join(lines[start_line - 1 : end_line]),
        highlight_line=line_number if start_line <= line_number <= end_line else None,
    )
