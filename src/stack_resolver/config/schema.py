"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MatchingConfig(BaseModel):
    """Filename normalization used to match frames to source maps."""

    relative_prefixes: list[str] = ["webpack:///", "../", "./"]
    script_alias: str = "~/scripts/"
    compiled_extension: str = ".js"

    @field_validator("relative_prefixes")
    @classmethod
    def validate_relative_prefixes(cls, v: list[str]) -> list[str]:
        """Reject empty prefixes, which would never be stripped."""
        if any(not prefix for prefix in v):
            raise ValueError("Relative prefixes must be non-empty strings")
        return v


class DisplayConfig(BaseModel):
    """Path normalization for display and export."""

    root_marker: str = "src"
    alias: str = "~/scripts/"

    @field_validator("root_marker")
    @classmethod
    def validate_root_marker(cls, v: str) -> str:
        """Validate the project-root marker is a single path segment."""
        if not v or "/" in v:
            raise ValueError(f"Root marker must be a single path segment: {v!r}")
        return v


class ResolutionConfig(BaseModel):
    """Original-position lookup configuration."""

    include_snippets: bool = True
    context_lines: int = Field(3, ge=0, le=50)


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("stack-resolver.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "console"] = "console"
    file: FileLoggingConfig = FileLoggingConfig()


class ResolverConfig(BaseSettings):
    """Root configuration for stack-resolver."""

    matching: MatchingConfig = MatchingConfig()
    display: DisplayConfig = DisplayConfig()
    resolution: ResolutionConfig = ResolutionConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="STACK_RESOLVER_",
        env_nested_delimiter="__",
    )
