"""Data models for embedded source snippets."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceSnippet:
    """Original source text surrounding a resolved line."""

    file_path: str
    start_line: int
    end_line: int
    content: str
    highlight_line: int | None = None  # Line the frame resolved to

    @property
    def line_count(self) -> int:
        """Number of lines in this snippet."""
        return self.end_line - self.start_line + 1
