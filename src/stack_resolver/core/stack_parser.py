"""Parser for minified JavaScript stack traces.

This module implements the StackParser class that turns raw error text
into structured stack frames. Two input dialects are supported, tried in
order:
- JSON: a single frame object or an array of frame objects
- Text: V8-style ``at fn (file:line:col)`` lines and bare ``file:line:col``
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

import structlog

from stack_resolver.models.frame import StackFrame
from stack_resolver.utils.async_helpers import InputError
from stack_resolver.utils.logging import LogEventNames

log = structlog.get_logger()

# Longest excerpt of unparseable input carried by the InputError
EXCERPT_LENGTH = 500


def _as_int(value: Any) -> int:
    """Coerce a JSON line/column value, treating anything unusable as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0


def _first(entry: Mapping[str, Any], *keys: str) -> Any:
    """Return the first truthy value among ``keys``."""
    for key in keys:
        value = entry.get(key)
        if value:
            return value
    return None


class StackParser:
    """Parser for minified JavaScript stack traces.

    Responsibilities:
    - Detect the input dialect (JSON or text)
    - Extract filename, function name, line and column per frame
    - Preserve input order

    Example:
        parser = StackParser()
        frames = parser.parse(error_text)
        print(f"{len(frames)} frames, top: {frames[0].filename}")
    """

    # Text patterns, most specific first. Each yields
    # (function, file, line, column); missing groups are None.
    TEXT_PATTERNS: tuple[tuple[re.Pattern[str], tuple[int | None, int, int, int | None]], ...] = (
        # at functionName (file.js:10:5)
        (re.compile(r"at\s+(.+?)\s+\((.+?):(\d+):(\d+)\)"), (1, 2, 3, 4)),
        # at file.js:10:5
        (re.compile(r"at\s+(.+?):(\d+):(\d+)"), (None, 1, 2, 3)),
        # file.js:10:5
        (re.compile(r"^(.+?):(\d+):(\d+)$"), (None, 1, 2, 3)),
        # at functionName (file.js:10)
        (re.compile(r"at\s+(.+?)\s+\((.+?):(\d+)\)"), (1, 2, 3, None)),
        # at file.js:10
        (re.compile(r"at\s+(.+?):(\d+)$"), (None, 1, 2, None)),
        # file.js:10
        (re.compile(r"^(.+?):(\d+)$"), (None, 1, 2, None)),
    )

    def parse(self, text: str) -> list[StackFrame]:
        """Parse stack frames from error text.

        Args:
            text: Raw error text in either dialect

        Returns:
            Frames in input order

        Raises:
            InputError: If the text is empty or contains no recognizable frame
        """
        if not text or not text.strip():
            raise InputError("Empty error text provided")

        excerpt = text[:EXCERPT_LENGTH] + ("..." if len(text) > EXCERPT_LENGTH else "")

        # A JSON array is never reread as text, even when every entry was dropped
        frames = self.parse_json(text)
        dialect = "json"
        if frames == []:
            raise InputError(
                f"No valid stack frame found in the JSON error list:\n{excerpt}",
                text=excerpt,
            )
        if frames is None:
            frames = self.parse_text(text)
            dialect = "text"

        if not frames:
            raise InputError(
                f"Could not parse any stack frame from the error text:\n{excerpt}",
                text=excerpt,
            )

        log.debug(LogEventNames.STACK_PARSED, dialect=dialect, frames=len(frames))
        return frames

    def parse_json(self, text: str) -> list[StackFrame] | None:
        """Parse the JSON dialect.

        Args:
            text: Raw error text

        Returns:
            Frames from well-formed entries (empty for an array with none),
            or None when the text is not JSON or is a single object without
            a filename and positive line
        """
        trimmed = text.strip()
        if not trimmed.startswith(("[", "{")):
            return None

        try:
            parsed = json.loads(trimmed)
        except ValueError:
            return None

        if isinstance(parsed, list):
            frames: list[StackFrame] = []
            for entry in parsed:
                if not isinstance(entry, Mapping):
                    continue
                frame = self._frame_from_entry(entry)
                if frame is not None:
                    frames.append(frame)
            return frames

        if isinstance(parsed, Mapping):
            frame = self._frame_from_entry(parsed)
            return [frame] if frame is not None else None

        return None

    def parse_text(self, text: str) -> list[StackFrame]:
        """Parse the line-oriented text dialect.

        Lines that match no pattern are skipped.

        Args:
            text: Raw error text

        Returns:
            Frames in line order (possibly empty)
        """
        frames: list[StackFrame] = []

        for line in text.splitlines():
            trimmed = line.strip()
            if not trimmed:
                continue

            frame = self._parse_line(trimmed)
            if frame is None:
                log.debug(LogEventNames.STACK_LINE_SKIPPED, line=trimmed)
                continue
            frames.append(frame)

        return frames

    def _parse_line(self, line: str) -> StackFrame | None:
        """Match one trimmed line against the text patterns in order."""
        for pattern, (func_group, file_group, line_group, col_group) in self.TEXT_PATTERNS:
            match = pattern.search(line)
            if not match:
                continue

            filename = match.group(file_group).strip()
            line_number = int(match.group(line_group))
            column = int(match.group(col_group)) if col_group is not None else 0
            function_name = match.group(func_group).strip() if func_group is not None else None

            # First matching pattern decides the line, even when it is unusable
            if not filename or line_number <= 0:
                return None

            return StackFrame(
                filename=filename,
                line=line_number,
                column=column,
                function_name=function_name or None,
            )

        return None

    def _frame_from_entry(self, entry: Mapping[str, Any]) -> StackFrame | None:
        """Build a frame from a JSON object, or None if it is not well-formed."""
        filename = _first(entry, "filename", "source")
        if not isinstance(filename, str) or not filename:
            return None

        line = _as_int(_first(entry, "lineno", "line"))
        if line <= 0:
            return None

        column = max(0, _as_int(_first(entry, "colno", "column")))
        function_name = _first(entry, "function", "functionName")

        return StackFrame(
            filename=filename,
            line=line,
            column=column,
            function_name=function_name if isinstance(function_name, str) else None,
        )
