"""Data models and transfer objects."""

from .frame import ANONYMOUS, ResolvedFrame, StackFrame
from .snippet import SourceSnippet
from .sourcemap import MappedPosition, OriginalLocation, SourceMapDocument

__all__ = [
    # Frame models
    "ANONYMOUS",
    "StackFrame",
    "ResolvedFrame",
    # Source map models
    "SourceMapDocument",
    "MappedPosition",
    "OriginalLocation",
    "SourceSnippet",
]
