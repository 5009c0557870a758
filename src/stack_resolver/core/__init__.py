"""Core resolution components.

This module exports the main pipeline classes:
- StackResolver / resolve_stack: End-to-end resolution of a stack trace
- StackParser: Parses JSON and text stack dialects into frames
- SourceMapMatcher: Picks the source map for a frame's filename
- PositionResolver / DecodeCache: Column-fallback original-position lookup
- normalize_path / format_location: Display normalization
"""

from stack_resolver.core.map_matcher import SourceMapMatcher
from stack_resolver.core.path_normalizer import format_location, normalize_path
from stack_resolver.core.pipeline import StackResolver, resolve_stack
from stack_resolver.core.position_resolver import DecodeCache, PositionResolver, extract_snippet
from stack_resolver.core.stack_parser import StackParser

__all__ = [
    "DecodeCache",
    "PositionResolver",
    "SourceMapMatcher",
    "StackParser",
    "StackResolver",
    "extract_snippet",
    "format_location",
    "normalize_path",
    "resolve_stack",
]
