"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    DisplayConfig,
    LoggingConfig,
    MatchingConfig,
    ResolutionConfig,
    ResolverConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "ResolverConfig",
    # Sections
    "MatchingConfig",
    "DisplayConfig",
    "ResolutionConfig",
    "LoggingConfig",
]
