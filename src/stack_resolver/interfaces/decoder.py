"""Abstract interface for source map decoders."""

from typing import Any, Protocol

from ..models.sourcemap import MappedPosition, SourceMapDocument


class MappingDecoder(Protocol):
    """Abstract interface for mapping-table decoders.

    This protocol defines the contract that decoder adapters must
    implement. The pipeline never inspects the index it gets back from
    ``decode``; it only hands it to ``query``.
    """

    def decode(self, document: SourceMapDocument) -> Any:
        """
        Decode a document's mapping table into a queryable index.

        Called at most once per document per pipeline invocation, from a
        worker thread.

        Args:
            document: The source map to decode

        Returns:
            An opaque index object accepted by ``query``

        Raises:
            DocumentDecodeError: If the document is malformed
        """
        ...

    def query(self, index: Any, line: int, column: int) -> MappedPosition | None:
        """
        Look up the original position for a generated position.

        Args:
            index: Index previously returned by ``decode``
            line: Generated line (1-based)
            column: Generated column (0-based)

        Returns:
            The mapped position, or None when nothing maps there
        """
        ...
