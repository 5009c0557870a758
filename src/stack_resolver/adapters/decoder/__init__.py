"""Mapping decoder implementations."""

from .sourcemap_lib import SourcemapLibDecoder

__all__ = ["SourcemapLibDecoder"]
