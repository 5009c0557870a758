"""Mapping decoder backed by the ``sourcemap`` library.

The library decodes the VLQ ``mappings`` string into a token index keyed
by 0-based (line, column). Its ``lookup`` returns the closest token at or
before the requested column on the same line and raises ``IndexError``
when the line has no token in that range.
"""

from __future__ import annotations

import json
from typing import Any

import sourcemap
import structlog
from sourcemap import SourceMapDecodeError

from ...models.sourcemap import MappedPosition, SourceMapDocument
from ...utils.async_helpers import DocumentDecodeError
from ...utils.logging import LogEventNames

log = structlog.get_logger()


class SourcemapLibDecoder:
    """``MappingDecoder`` implementation using ``sourcemap.loads``.

    Example:
        decoder = SourcemapLibDecoder()
        index = decoder.decode(document)
        position = decoder.query(index, line=1, column=49)
    """

    def decode(self, document: SourceMapDocument) -> Any:
        """Decode a document into a ``sourcemap.SourceMapIndex``.

        Raises:
            DocumentDecodeError: If the document cannot be decoded
        """
        if "sections" in document.content:
            raise DocumentDecodeError(
                f"Indexed source maps are not supported: {document.name}",
                document_name=document.name,
            )

        raw = dict(document.content)
        # The library requires "names"; many minifiers omit it when empty
        raw.setdefault("names", [])

        try:
            index = sourcemap.loads(json.dumps(raw))
        except (
            SourceMapDecodeError,
            AttributeError,
            IndexError,
            KeyError,
            TypeError,
            ValueError,
        ) as e:
            raise DocumentDecodeError(
                f"Failed to decode source map {document.name}: {e}",
                document_name=document.name,
            ) from e

        log.debug(
            LogEventNames.DOCUMENT_DECODED,
            document=document.name,
            tokens=len(index.tokens),
        )
        return index

    def query(self, index: Any, line: int, column: int) -> MappedPosition | None:
        """Look up a 1-based line and 0-based column."""
        if line < 1 or column < 0:
            return None

        try:
            token = index.lookup(line=line - 1, column=column)
        except (IndexError, KeyError):
            return None

        if not token.src:
            return None

        return MappedPosition(
            source=token.src,
            line=token.src_line + 1,
            column=token.src_col,
            name=token.name,
        )
