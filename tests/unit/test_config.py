"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from stack_resolver.config.loader import load_config, substitute_env_vars
from stack_resolver.config.schema import (
    DisplayConfig,
    LoggingConfig,
    MatchingConfig,
    ResolutionConfig,
    ResolverConfig,
)


class TestSubstituteEnvVars:
    """Test environment variable substitution."""

    def test_substitute_single_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting a single environment variable."""
        monkeypatch.setenv("TEST_VAR", "test_value")
        assert substitute_env_vars("Value is ${TEST_VAR}") == "Value is test_value"

    def test_substitute_multiple_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting multiple environment variables."""
        monkeypatch.setenv("VAR1", "value1")
        monkeypatch.setenv("VAR2", "value2")
        assert substitute_env_vars("${VAR1} and ${VAR2}") == "value1 and value2"

    def test_missing_env_var_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that missing environment variables raise ValueError."""
        monkeypatch.delenv("MISSING", raising=False)
        with pytest.raises(ValueError, match="Environment variable MISSING not found"):
            substitute_env_vars("Value is ${MISSING}")

    def test_no_substitution_needed(self) -> None:
        """Test text without environment variables passes through unchanged."""
        assert substitute_env_vars("plain text without vars") == "plain text without vars"


class TestMatchingConfig:
    """Test MatchingConfig validation."""

    def test_defaults(self) -> None:
        """Test default normalization settings."""
        config = MatchingConfig()
        assert config.relative_prefixes == ["webpack:///", "../", "./"]
        assert config.script_alias == "~/scripts/"
        assert config.compiled_extension == ".js"

    def test_empty_prefix_rejected(self) -> None:
        """Test that an empty relative prefix is rejected."""
        with pytest.raises(ValidationError, match="non-empty"):
            MatchingConfig(relative_prefixes=["./", ""])


class TestDisplayConfig:
    """Test DisplayConfig validation."""

    def test_defaults(self) -> None:
        """Test default display settings."""
        config = DisplayConfig()
        assert config.root_marker == "src"
        assert config.alias == "~/scripts/"

    @pytest.mark.parametrize("marker", ["", "src/app", "/src"])
    def test_invalid_root_marker(self, marker: str) -> None:
        """Test that the root marker must be a single segment."""
        with pytest.raises(ValidationError, match="single path segment"):
            DisplayConfig(root_marker=marker)


class TestResolutionConfig:
    """Test ResolutionConfig validation."""

    def test_defaults(self) -> None:
        """Test default resolution settings."""
        config = ResolutionConfig()
        assert config.include_snippets is True
        assert config.context_lines == 3

    @pytest.mark.parametrize("value", [-1, 51])
    def test_context_lines_bounds(self, value: int) -> None:
        """Test that context_lines is bounded."""
        with pytest.raises(ValidationError):
            ResolutionConfig(context_lines=value)


class TestLoggingConfig:
    """Test LoggingConfig validation."""

    def test_invalid_level(self) -> None:
        """Test that unknown levels are rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")  # type: ignore[arg-type]


class TestResolverConfig:
    """Test the root configuration."""

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test nested overrides through environment variables."""
        monkeypatch.setenv("STACK_RESOLVER_RESOLUTION__CONTEXT_LINES", "7")
        monkeypatch.setenv("STACK_RESOLVER_DISPLAY__ROOT_MARKER", "app")

        config = ResolverConfig()

        assert config.resolution.context_lines == 7
        assert config.display.root_marker == "app"


class TestLoadConfig:
    """Test configuration file loading."""

    def test_no_path_returns_defaults(self) -> None:
        """Test that omitting a path gives the default configuration."""
        config = load_config()
        assert config.resolution.context_lines == 3
        assert config.logging.level == "WARNING"

    def test_load_valid_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading a YAML file with env substitution."""
        monkeypatch.setenv("RESOLVER_LOG_LEVEL", "DEBUG")
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            """
matching:
  script_alias: "@/"
display:
  root_marker: app
resolution:
  include_snippets: false
  context_lines: 5
logging:
  level: ${RESOLVER_LOG_LEVEL}
  format: json
"""
        )

        config = load_config(config_file)

        assert config.matching.script_alias == "@/"
        assert config.display.root_marker == "app"
        assert config.resolution.include_snippets is False
        assert config.resolution.context_lines == 5
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        """Test that an empty YAML file is accepted."""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        assert load_config(config_file).display.root_marker == "src"

    def test_load_config_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_load_config_missing_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an unresolved variable raises ValueError."""
        monkeypatch.delenv("UNDEFINED_RESOLVER_VAR", raising=False)
        config_file = tmp_path / "config.yaml"
        config_file.write_text("logging:\n  level: ${UNDEFINED_RESOLVER_VAR}\n")

        with pytest.raises(ValueError, match="UNDEFINED_RESOLVER_VAR"):
            load_config(config_file)

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        """Test that a YAML list at the root is rejected."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- one\n- two\n")

        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(config_file)

    def test_invalid_values(self, tmp_path: Path) -> None:
        """Test that schema violations raise ValidationError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("resolution:\n  context_lines: 500\n")

        with pytest.raises(ValidationError):
            load_config(config_file)
