"""Stack resolution pipeline.

This module implements the end-to-end flow:
1. Validate input and parse the stack text into frames
2. For each frame, match a source map by filename
3. Decode the matched map (once per invocation) and resolve the position
4. Emit one ResolvedFrame per input frame, in input order

Per-frame problems (no matching map, malformed map, no mapping, any
unexpected error) never abort the batch; the frame is reported unmapped.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from stack_resolver.config.schema import ResolverConfig
from stack_resolver.core.map_matcher import SourceMapMatcher
from stack_resolver.core.position_resolver import DecodeCache, PositionResolver, extract_snippet
from stack_resolver.core.stack_parser import StackParser
from stack_resolver.interfaces.decoder import MappingDecoder
from stack_resolver.models.frame import ANONYMOUS, ResolvedFrame, StackFrame
from stack_resolver.models.sourcemap import SourceMapDocument
from stack_resolver.utils.async_helpers import (
    CancellationToken,
    DocumentDecodeError,
    InputError,
)
from stack_resolver.utils.logging import LogEventNames, bind_context, unbind_context

log = structlog.get_logger()

DocumentLike = SourceMapDocument | Mapping[str, Any]


def _coerce_documents(documents: Sequence[DocumentLike] | None) -> list[SourceMapDocument]:
    """Accept documents or ``{name, parsedContent}`` pairs.

    Pairs without a name or parsed content are skipped; the call only
    fails when no usable document is left.
    """
    if not documents:
        raise InputError("Please upload at least one source map file")

    coerced: list[SourceMapDocument] = []
    for document in documents:
        if isinstance(document, SourceMapDocument):
            coerced.append(document)
        elif not isinstance(document, Mapping):
            raise InputError(f"Unsupported source map entry: {type(document).__name__}")
        else:
            try:
                coerced.append(SourceMapDocument.from_mapping(document))
            except ValueError as e:
                log.warning(
                    LogEventNames.DOCUMENT_SKIPPED,
                    name=document.get("name"),
                    error=str(e),
                )

    if not coerced:
        raise InputError("Please upload at least one valid source map file")
    return coerced


class StackResolver:
    """Resolves minified stack traces against a set of source maps.

    Responsibilities:
    - Parse raw error text into frames
    - Match each frame to a source map and resolve its position
    - Keep one decode cache per invocation
    - Supersede an in-flight invocation when a new one starts

    Example:
        resolver = StackResolver()
        frames = await resolver.resolve(documents, error_text)
        for frame in frames:
            print(frame.location)
    """

    def __init__(
        self,
        decoder: MappingDecoder | None = None,
        config: ResolverConfig | None = None,
    ) -> None:
        """Initialize the StackResolver.

        Args:
            decoder: Mapping decoder (defaults to the ``sourcemap`` library)
            config: Resolver configuration (defaults if None)
        """
        if decoder is None:
            from stack_resolver.adapters.decoder import SourcemapLibDecoder

            decoder = SourcemapLibDecoder()

        self._decoder = decoder
        self._config = config or ResolverConfig()
        self._parser = StackParser()
        self._matcher = SourceMapMatcher(self._config.matching)
        self._resolver = PositionResolver(decoder)
        self._current_token: CancellationToken | None = None

    async def resolve(
        self,
        documents: Sequence[DocumentLike] | None,
        raw_error_text: str | None,
    ) -> list[ResolvedFrame]:
        """Resolve every frame of a stack trace.

        Starting a new call cancels any call still in flight on this
        resolver; the superseded call raises ``asyncio.CancelledError``
        and its partial results are discarded.

        Args:
            documents: Source maps in upload order
            raw_error_text: Raw stack text (JSON or text dialect)

        Returns:
            One ResolvedFrame per parsed frame, in input order

        Raises:
            InputError: If no documents are given, the text is empty, or
                no frame can be parsed
            asyncio.CancelledError: If a newer call superseded this one
        """
        if self._current_token is not None:
            self._current_token.cancel()
        token = CancellationToken()
        self._current_token = token

        invocation_id = uuid.uuid4().hex[:8]
        bind_context(invocation_id=invocation_id)
        try:
            return await self._run(documents, raw_error_text, token)
        except asyncio.CancelledError:
            log.info(LogEventNames.RESOLVE_SUPERSEDED)
            raise
        finally:
            unbind_context("invocation_id")
            if self._current_token is token:
                self._current_token = None

    async def _run(
        self,
        documents: Sequence[DocumentLike] | None,
        raw_error_text: str | None,
        token: CancellationToken,
    ) -> list[ResolvedFrame]:
        try:
            coerced = _coerce_documents(documents)
            if not raw_error_text or not raw_error_text.strip():
                raise InputError("Please enter the error stack text")
            frames = self._parser.parse(raw_error_text)
        except InputError as e:
            log.warning(LogEventNames.INPUT_REJECTED, error=str(e).splitlines()[0])
            raise

        log.info(LogEventNames.RESOLVE_STARTED, frames=len(frames), documents=len(coerced))

        cache = DecodeCache(self._decoder)
        results: list[ResolvedFrame] = []

        for frame in frames:
            token.raise_if_cancelled()
            results.append(await self._resolve_frame(frame, coerced, cache))

        token.raise_if_cancelled()

        log.info(
            LogEventNames.RESOLVE_COMPLETE,
            frames=len(results),
            mapped=sum(1 for r in results if r.has_mapping),
            decoded_documents=len(cache),
        )
        return results

    async def _resolve_frame(
        self,
        frame: StackFrame,
        documents: Sequence[SourceMapDocument],
        cache: DecodeCache,
    ) -> ResolvedFrame:
        """Resolve one frame, downgrading every failure to an unmapped frame."""
        document: SourceMapDocument | None = None
        try:
            document = self._matcher.find_match(frame.filename, documents)
            if document is None:
                log.info(LogEventNames.SOURCE_MAP_NOT_MATCHED, filename=frame.filename)
                return self._unmapped(frame, None)

            index = await cache.get(document)
            location = self._resolver.resolve(index, frame.line, frame.column)
            if location is None:
                log.info(
                    LogEventNames.MAPPING_NOT_FOUND,
                    filename=frame.filename,
                    line=frame.line,
                    column=frame.column,
                    document=document.name,
                )
                return self._unmapped(frame, document)

            display = self._config.display
            snippet = None
            resolution = self._config.resolution
            if resolution.include_snippets:
                snippet = extract_snippet(
                    document, location.source, location.line, resolution.context_lines
                )

            return ResolvedFrame(
                function_name=frame.function_name or location.name or ANONYMOUS,
                source=location.source,
                compiled_source=frame.filename,
                compiled_line=frame.line,
                compiled_column=frame.column,
                original_line=location.line,
                original_column=location.column,
                source_map=document.name,
                snippet=snippet,
                root_marker=display.root_marker,
                alias=display.alias,
            )

        except DocumentDecodeError:
            # Already logged once by the cache
            return self._unmapped(frame, document)
        except Exception as e:
            log.exception(
                LogEventNames.FRAME_RESOLVE_ERROR,
                filename=frame.filename,
                line=frame.line,
                column=frame.column,
                error=str(e),
            )
            return self._unmapped(frame, document)

    def _unmapped(self, frame: StackFrame, document: SourceMapDocument | None) -> ResolvedFrame:
        """Build an unmapped frame carrying the configured display settings."""
        display = self._config.display
        return ResolvedFrame.unmapped(
            frame,
            source_map=document.name if document is not None else None,
            root_marker=display.root_marker,
            alias=display.alias,
        )


async def resolve_stack(
    documents: Sequence[DocumentLike] | None,
    raw_error_text: str | None,
    *,
    decoder: MappingDecoder | None = None,
    config: ResolverConfig | None = None,
) -> list[ResolvedFrame]:
    """Resolve a stack trace with a fresh, single-use resolver.

    Args:
        documents: Source maps or ``{name, parsedContent}`` pairs, in upload order
        raw_error_text: Raw stack text
        decoder: Mapping decoder (defaults to the ``sourcemap`` library)
        config: Resolver configuration

    Returns:
        One ResolvedFrame per parsed frame, in input order

    Raises:
        InputError: If no documents are given, the text is empty, or no
            frame can be parsed
    """
    return await StackResolver(decoder=decoder, config=config).resolve(documents, raw_error_text)
