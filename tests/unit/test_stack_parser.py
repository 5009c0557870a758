"""Tests for StackParser functionality."""

import json

import pytest

from stack_resolver.core.stack_parser import StackParser
from stack_resolver.models.frame import StackFrame
from stack_resolver.utils.async_helpers import InputError


@pytest.fixture
def parser() -> StackParser:
    """Create a StackParser instance."""
    return StackParser()


class TestJsonDialect:
    """Tests for the JSON stack dialect."""

    def test_array_keeps_well_formed_entries(
        self,
        parser: StackParser,
        sentry_stack: str,
    ) -> None:
        """Test that entries without filename or positive line are dropped."""
        frames = parser.parse(sentry_stack)

        assert len(frames) == 2
        assert frames[0] == StackFrame(
            filename="https://cdn.example.com/assets/app.min.js",
            line=2,
            column=40,
            function_name="init",
        )
        assert frames[1].filename == "https://cdn.example.com/assets/unknown.min.js"
        assert frames[1].function_name is None

    def test_frame_count_equals_well_formed_count(self, parser: StackParser) -> None:
        """Test output count against a mix of valid and invalid entries."""
        entries = [
            {"filename": "a.js", "lineno": 1, "colno": 1},
            {"filename": "", "lineno": 1},
            {"filename": "b.js", "lineno": -3},
            {"source": "c.js", "line": 4, "column": 2},
            {"filename": "d.js", "lineno": 9},
            "not an object",
        ]
        frames = parser.parse(json.dumps(entries))

        assert [f.filename for f in frames] == ["a.js", "c.js", "d.js"]

    def test_alternate_key_names(self, parser: StackParser) -> None:
        """Test source/line/column/functionName aliases."""
        text = '[{"source": "x.js", "line": 3, "column": 7, "functionName": "run"}]'
        frames = parser.parse(text)

        assert frames == [StackFrame(filename="x.js", line=3, column=7, function_name="run")]

    def test_missing_column_defaults_to_zero(self, parser: StackParser) -> None:
        """Test that a JSON entry without a column gets column 0."""
        frames = parser.parse('[{"filename": "a.js", "lineno": 5}]')

        assert frames[0].column == 0

    def test_numeric_strings_accepted(self, parser: StackParser) -> None:
        """Test that line and column given as strings are coerced."""
        frames = parser.parse('[{"filename": "a.js", "lineno": "5", "colno": "12"}]')

        assert frames[0].line == 5
        assert frames[0].column == 12

    def test_single_object(self, parser: StackParser) -> None:
        """Test a bare object carrying one frame."""
        frames = parser.parse('{"filename": "a.js", "lineno": 5, "colno": 10}')

        assert frames == [StackFrame(filename="a.js", line=5, column=10)]

    def test_single_object_without_keys_falls_back_to_text(self, parser: StackParser) -> None:
        """Test that an object lacking required keys is not a JSON frame."""
        assert parser.parse_json('{"message": "boom"}') is None

        with pytest.raises(InputError):
            parser.parse('{"message": "boom"}')

    def test_invalid_json_falls_back_to_text(self, parser: StackParser) -> None:
        """Test that malformed JSON is handed to the text dialect."""
        text = "[not json\n    at run (app.js:1:2)"
        frames = parser.parse(text)

        assert frames == [StackFrame(filename="app.js", line=1, column=2, function_name="run")]


class TestTextDialect:
    """Tests for the line-oriented text dialect."""

    def test_chrome_stack(self, parser: StackParser, chrome_stack: str) -> None:
        """Test a typical V8 stack with a header and an unparseable line."""
        frames = parser.parse(chrome_stack)

        assert frames == [
            StackFrame(
                filename="https://cdn.example.com/assets/app.min.js",
                line=1,
                column=26,
                function_name="formatDate",
            ),
            StackFrame(
                filename="https://cdn.example.com/assets/app.min.js",
                line=1,
                column=5,
                function_name="HTMLButtonElement.<anonymous>",
            ),
            StackFrame(
                filename="https://cdn.example.com/assets/vendor.min.js",
                line=1,
                column=120,
            ),
        ]

    def test_bare_file_line_column(self, parser: StackParser) -> None:
        """Test a bare file:line:column line."""
        frames = parser.parse("main.js:10:5")

        assert frames == [StackFrame(filename="main.js", line=10, column=5)]

    def test_function_with_line_only(self, parser: StackParser) -> None:
        """Test that 'at fn (file:line)' defaults the column to 0."""
        frames = parser.parse("at render (main.js:42)")

        assert frames == [StackFrame(filename="main.js", line=42, column=0, function_name="render")]

    def test_at_file_with_line_only(self, parser: StackParser) -> None:
        """Test that 'at file:line' defaults the column to 0."""
        frames = parser.parse("at https://example.com/main.js:42")

        assert frames == [StackFrame(filename="https://example.com/main.js", line=42, column=0)]

    def test_bare_file_with_line_only(self, parser: StackParser) -> None:
        """Test that 'file:line' defaults the column to 0."""
        frames = parser.parse("main.js:42")

        assert frames == [StackFrame(filename="main.js", line=42, column=0)]

    def test_order_matches_input_and_skips_noise(self, parser: StackParser) -> None:
        """Test that matching lines keep their order and others vanish."""
        text = "\n".join(
            [
                "Error: failed",
                "    at first (a.js:1:1)",
                "",
                "some unrelated chatter",
                "    at second (b.js:2:2)",
                "    at c.js:3:3",
            ]
        )
        frames = parser.parse(text)

        assert [f.filename for f in frames] == ["a.js", "b.js", "c.js"]
        assert [f.function_name for f in frames] == ["first", "second", None]

    def test_zero_line_is_ignored(self, parser: StackParser) -> None:
        """Test that a frame with line 0 is not produced."""
        frames = parser.parse_text("at run (a.js:0:4)\nat run (b.js:3:4)")

        assert [f.filename for f in frames] == ["b.js"]

    def test_url_with_port(self, parser: StackParser) -> None:
        """Test that a port number is kept as part of the filename."""
        frames = parser.parse("at load (http://localhost:8080/static/app.js:12:34)")

        assert frames[0].filename == "http://localhost:8080/static/app.js"
        assert frames[0].line == 12
        assert frames[0].column == 34


class TestParseErrors:
    """Tests for input errors raised by the parser."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\n"])
    def test_empty_text(self, parser: StackParser, text: str) -> None:
        """Test that blank input is rejected."""
        with pytest.raises(InputError, match="Empty error text"):
            parser.parse(text)

    def test_unparseable_text_carries_excerpt(self, parser: StackParser) -> None:
        """Test that the error includes the offending text and a usage example."""
        with pytest.raises(InputError) as exc_info:
            parser.parse("nothing to see here")

        assert exc_info.value.text == "nothing to see here"
        assert "nothing to see here" in str(exc_info.value)
        assert '"lineno"' in str(exc_info.value)

    def test_long_text_is_truncated(self, parser: StackParser) -> None:
        """Test that the carried excerpt is bounded."""
        with pytest.raises(InputError) as exc_info:
            parser.parse("x" * 2000)

        assert exc_info.value.text is not None
        assert len(exc_info.value.text) == 503
        assert exc_info.value.text.endswith("...")

    @pytest.mark.parametrize(
        "text",
        ['[{"filename": "a.js"}]', "[]", '["at f (https://x/app.min.js:1:50)"]'],
    )
    def test_empty_json_array(self, parser: StackParser, text: str) -> None:
        """Test that an array with no usable entries is rejected without a text fallback."""
        with pytest.raises(InputError, match="No valid stack frame found in the JSON error list"):
            parser.parse(text)
