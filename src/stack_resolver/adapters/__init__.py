"""Adapter implementations for external capabilities.

This package contains concrete implementations:
- decoder: Mapping decoders (``sourcemap`` library)
- files: Local filesystem / ZIP loading of source map documents
"""

from .decoder import SourcemapLibDecoder

__all__ = ["SourcemapLibDecoder"]
