"""Matching of stack frame filenames to loaded source maps.

This module implements the SourceMapMatcher class that picks, among many
loaded source maps, the one that describes a given compiled file. Three
rules are tried in priority order, each across all documents:
1. Exact match - normalized compiled file or source entry equals the target
2. Containment - one normalized path contains the other
3. Trailing segment - the target's last path segment occurs in a source entry
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import structlog

from stack_resolver.config.schema import MatchingConfig
from stack_resolver.models.sourcemap import SourceMapDocument
from stack_resolver.utils.logging import LogEventNames

log = structlog.get_logger()


class SourceMapMatcher:
    """Finds the source map that belongs to a compiled filename.

    Matching is recomputed for every frame; no index is built across the
    stack, so a wrong early match cannot leak into later frames.

    Example:
        matcher = SourceMapMatcher()
        document = matcher.find_match("https://cdn.example.com/app.min.js", documents)
        if document is not None:
            print(f"Using {document.name}")
    """

    def __init__(self, config: MatchingConfig | None = None) -> None:
        """Initialize the SourceMapMatcher.

        Args:
            config: Filename normalization settings (defaults if None)
        """
        self._config = config or MatchingConfig()

    def normalize(self, name: str) -> str:
        """Normalize a filename for comparison.

        Strips relative prefixes and the script alias (repeatedly), drops
        the compiled extension and lower-cases the rest.

        Args:
            name: Filename or source path

        Returns:
            Normalized name (may be empty)
        """
        prefixes = [*self._config.relative_prefixes, self._config.script_alias]
        normalized = name.strip()

        stripped = True
        while stripped:
            stripped = False
            for prefix in prefixes:
                if prefix and normalized.startswith(prefix):
                    normalized = normalized[len(prefix) :]
                    stripped = True

        extension = self._config.compiled_extension
        if extension and normalized.endswith(extension):
            normalized = normalized[: -len(extension)]

        return normalized.lower()

    def find_match(
        self,
        filename: str,
        documents: Sequence[SourceMapDocument],
    ) -> SourceMapDocument | None:
        """Find the document describing ``filename``.

        Args:
            filename: Compiled filename from a stack frame
            documents: Loaded documents in upload order

        Returns:
            The first matching document under the highest-priority rule,
            or None if no rule matches
        """
        if not filename or not documents:
            return None

        target = self.normalize(filename)
        if not target:
            return None

        segment = target.rsplit("/", 1)[-1]

        rules: list[tuple[str, Callable[[SourceMapDocument], bool]]] = [
            ("exact", lambda doc: self._matches_exact(target, doc)),
            ("contains", lambda doc: self._matches_containment(target, doc)),
            ("segment", lambda doc: self._matches_segment(segment, doc)),
        ]

        for rule_name, rule in rules:
            for document in documents:
                if rule(document):
                    log.debug(
                        LogEventNames.SOURCE_MAP_MATCHED,
                        filename=filename,
                        document=document.name,
                        rule=rule_name,
                    )
                    return document

        log.debug(LogEventNames.SOURCE_MAP_NOT_MATCHED, filename=filename)
        return None

    def _candidates(self, document: SourceMapDocument) -> list[str]:
        """Normalized compiled file and source entries, empty ones removed."""
        names = [document.file, *document.sources]
        return [n for n in (self.normalize(name) for name in names if name) if n]

    def _matches_exact(self, target: str, document: SourceMapDocument) -> bool:
        return any(candidate == target for candidate in self._candidates(document))

    def _matches_containment(self, target: str, document: SourceMapDocument) -> bool:
        return any(
            target in candidate or candidate in target
            for candidate in self._candidates(document)
        )

    def _matches_segment(self, segment: str, document: SourceMapDocument) -> bool:
        if not segment:
            return False
        return any(segment in source.lower() for source in document.sources)
