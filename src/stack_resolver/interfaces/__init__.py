"""Abstract interfaces for external capabilities."""

from .decoder import MappingDecoder

__all__ = ["MappingDecoder"]
