"""Data models for source map documents and positions."""

from __future__ import annotations

import posixpath
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, eq=False)
class SourceMapDocument:
    """A loaded source map, read-only after construction.

    Documents compare and hash by identity so they can key the decode
    cache even though their content is an unhashable mapping.
    """

    name: str
    content: Mapping[str, Any]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SourceMapDocument:
        """Build a document from a ``{name, parsedContent}`` pair.

        ``content`` is accepted as an alias of ``parsedContent``.

        Raises:
            ValueError: If the pair has no name or no content mapping
        """
        name = data.get("name")
        content = data.get("parsedContent", data.get("content"))
        if not isinstance(name, str) or not name:
            raise ValueError("Source map entry is missing a name")
        if not isinstance(content, Mapping):
            raise ValueError(f"Source map {name} has no parsed content")
        return cls(name=name, content=content)

    @property
    def version(self) -> int | None:
        value = self.content.get("version")
        return value if isinstance(value, int) else None

    @property
    def file(self) -> str:
        """Compiled file name, or an empty string when absent."""
        value = self.content.get("file")
        return value if isinstance(value, str) else ""

    @property
    def sources(self) -> list[str]:
        value = self.content.get("sources")
        if not isinstance(value, list):
            return []
        return [s for s in value if isinstance(s, str)]

    @property
    def source_root(self) -> str | None:
        value = self.content.get("sourceRoot")
        return value if isinstance(value, str) and value else None

    @property
    def mappings(self) -> str:
        value = self.content.get("mappings")
        return value if isinstance(value, str) else ""

    @property
    def sources_content(self) -> list[str | None]:
        value = self.content.get("sourcesContent")
        if not isinstance(value, list):
            return []
        return [s if isinstance(s, str) else None for s in value]

    def content_for(self, source: str) -> str | None:
        """Return the embedded text of a source, if the map carries it.

        ``source`` may be either the raw ``sources`` entry or the entry
        joined onto ``sourceRoot``.
        """
        raw_sources = self.content.get("sources")
        if not isinstance(raw_sources, list):
            return None
        embedded = self.sources_content
        root = self.source_root
        for i, entry in enumerate(raw_sources):
            if not isinstance(entry, str) or i >= len(embedded):
                continue
            if entry == source or (root is not None and posixpath.join(root, entry) == source):
                return embedded[i]
        return None


@dataclass(frozen=True)
class MappedPosition:
    """A raw decoder hit: 1-based line, 0-based column."""

    source: str | None
    line: int
    column: int
    name: str | None = None


@dataclass(frozen=True)
class OriginalLocation:
    """An original source position with 1-based line and column."""

    source: str
    line: int
    column: int
    name: str | None = None
