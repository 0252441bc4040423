"""Tests for error types and location formatting."""

from __future__ import annotations

from fan.core.errors import ErrorContext, FanError, ParseError, make_parse_error


class TestMakeParseError:
    def test_location_from_offset(self) -> None:
        text = "unit grammar G;\na: @"
        error = make_parse_error("Unexpected character", "g.fan", text, text.index("@"))

        assert isinstance(error, ParseError)
        assert isinstance(error, FanError)
        assert error.message == "Unexpected character"
        assert (error.context.line, error.context.column) == (2, 4)
        assert error.context.snippet == "a: @"

    def test_offset_is_clamped(self) -> None:
        error = make_parse_error("oops", "g.fan", "ab", 50)
        assert error.context.offset == 2
        assert error.context.column == 3

    def test_str_includes_snippet_and_marker(self) -> None:
        error = make_parse_error("bad", "g.fan", "a: @", 3)
        lines = str(error).splitlines()

        assert lines[0] == "g.fan:1:4"
        assert lines[1] == "   1 | a: @"
        assert lines[2].index("^") == len("   1 | ") + 3
        assert lines[3] == "bad"


class TestErrorContext:
    def test_format_without_snippet(self) -> None:
        assert ErrorContext(source="x.fan", line=3, column=7).format() == "x.fan:3:7"

    def test_error_without_context(self) -> None:
        assert str(FanError("plain")) == "plain"
