"""Data models for stack frames before and after resolution."""

from dataclasses import asdict, dataclass
from typing import Any

from .snippet import SourceSnippet

ANONYMOUS = "(anonymous)"

# Display defaults, overridable through the ``display`` config section
DEFAULT_ROOT_MARKER = "src"
DEFAULT_ALIAS = "~/scripts/"


@dataclass(frozen=True)
class StackFrame:
    """A single frame parsed from a minified JavaScript stack trace."""

    filename: str
    line: int  # 1-based
    column: int  # 1-based, 0 when the stack omitted it
    function_name: str | None = None

    def __post_init__(self) -> None:
        if not self.filename:
            raise ValueError("StackFrame filename must not be empty")
        if self.line <= 0:
            raise ValueError(f"StackFrame line must be positive, got {self.line}")
        if self.column < 0:
            raise ValueError(f"StackFrame column must not be negative, got {self.column}")


@dataclass(frozen=True)
class ResolvedFrame:
    """A stack frame mapped back (or not) to its original source.

    ``root_marker`` and ``alias`` are the display settings the frame was
    resolved with; ``display_path``, ``location`` and ``to_dict`` use them.
    """

    function_name: str
    source: str  # Original source path, or the compiled filename when unmapped
    compiled_source: str
    compiled_line: int
    compiled_column: int
    original_line: int | None = None
    original_column: int | None = None
    source_map: str | None = None  # Name of the document that was matched
    snippet: SourceSnippet | None = None
    root_marker: str = DEFAULT_ROOT_MARKER
    alias: str = DEFAULT_ALIAS

    @property
    def has_mapping(self) -> bool:
        """Whether an original position was found for this frame."""
        return self.original_line is not None

    @property
    def display_path(self) -> str:
        """Source path normalized for display and export."""
        from stack_resolver.core.path_normalizer import normalize_path

        return normalize_path(self.source, root_marker=self.root_marker, alias=self.alias)

    @property
    def location(self) -> str:
        """Export string in ``path:line:column`` form."""
        from stack_resolver.core.path_normalizer import format_location

        return format_location(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON export, including the derived fields."""
        data = asdict(self)
        del data["root_marker"], data["alias"]
        data["has_mapping"] = self.has_mapping
        data["location"] = self.location
        return data

    @classmethod
    def unmapped(
        cls,
        frame: StackFrame,
        source_map: str | None = None,
        root_marker: str = DEFAULT_ROOT_MARKER,
        alias: str = DEFAULT_ALIAS,
    ) -> "ResolvedFrame":
        """Build a frame that carries through its compiled location."""
        return cls(
            function_name=frame.function_name or ANONYMOUS,
            source=frame.filename,
            compiled_source=frame.filename,
            compiled_line=frame.line,
            compiled_column=frame.column,
            source_map=source_map,
            root_marker=root_marker,
            alias=alias,
        )
