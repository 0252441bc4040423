"""
Error types for fan grammar parsing and configuration.
"""

from dataclasses import dataclass
from typing import Optional


class FanError(Exception):
    """Base exception for all fan errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(FanError):
    """
    Raised when grammar source cannot be parsed.

    Examples:
    - Missing `unit grammar NAME;` header
    - Unexpected characters or tokens
    - Unterminated string or regex literals
    - Unbalanced or too deeply nested groups
    """

    pass


class ConfigError(FanError):
    """
    Raised when server configuration is invalid.

    Examples:
    - Unreadable or malformed fan.toml
    - Unknown diagnostic severity
    - Non-numeric nesting depth
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        source: Document name or URI where the error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        offset: Character offset into the document (0-indexed)
        snippet: Optional source line showing the error location
    """

    source: str
    line: int
    column: int
    offset: int = 0
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "Grammar.fan:10:5"
        """
        location = f"{self.source}:{self.line}:{self.column}"
        if self.snippet is not None:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format the offending line with its number and an error marker."""
        if self.snippet is None:
            return ""

        prefix = f"{self.line:4d} | "
        marker_pos = len(prefix) + self.column - 1
        return f"{prefix}{self.snippet}\n{' ' * marker_pos}^^^"


def make_parse_error(
    message: str,
    source: str,
    text: str,
    offset: int,
) -> ParseError:
    """
    Helper to create a ParseError with context computed from an offset.

    Args:
        message: Error description
        source: Document name or URI
        text: Full document text
        offset: Character offset of the error

    Returns:
        ParseError with line, column and snippet attached
    """
    offset = max(0, min(offset, len(text)))
    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)

    context = ErrorContext(
        source=source,
        line=text.count("\n", 0, offset) + 1,
        column=offset - line_start + 1,
        offset=offset,
        snippet=text[line_start:line_end],
    )
    return ParseError(message, context)
