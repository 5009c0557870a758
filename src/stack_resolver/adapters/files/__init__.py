"""Source map document loaders."""

from .local import SourceMapLoadError, load_documents

__all__ = ["SourceMapLoadError", "load_documents"]
