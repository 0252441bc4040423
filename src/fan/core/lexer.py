"""
Lexer/Tokenizer for fan grammar documents.

Converts raw grammar text into a stream of tokens with source location
tracking. Every token records its line/column (1-indexed) and the
character offsets of the text it was read from.
"""

import re
from dataclasses import dataclass
from enum import Enum

from .errors import make_parse_error


class TokenType(Enum):
    """Token types in the fan grammar notation."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    REGEX = "REGEX"

    # Rule structure
    COLON = ":"
    SEMICOLON = ";"
    PIPE = "|"
    LPAREN = "("
    RPAREN = ")"

    # Elements
    PLUS = "+"
    MINUS = "-"
    MODIFIER = "MODIFIER"
    QUANTIFIER = "QUANTIFIER"
    SEPARATOR = "SEPARATOR"

    EOF = "EOF"


# Prefix characters that may be attached to a rule reference
MODIFIER_CHARS = ".!&~"

# Directly attached repetition suffix: (?) (s) (s?) (3) (1..) (1..3)
QUANTIFIER_PATTERN = re.compile(r"\((\?|s\??|\d+(?:\.\.\d*)?)\)")


@dataclass
class Token:
    """
    A single token in a grammar document.

    Attributes:
        type: Type of token
        value: String value of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        start: Offset of the first character
        end: Offset just past the last character
    """

    type: TokenType
    value: str
    line: int
    column: int
    start: int
    end: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for fan grammar documents.

    Whitespace and ``#`` comments separate tokens and are otherwise
    discarded; newlines carry no meaning.
    """

    def __init__(self, text: str, source: str = "<grammar>"):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            source: Document name or URI (for error reporting)
        """
        self.text = text
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def error(self, message: str, offset: int | None = None):
        return make_parse_error(
            message, self.source, self.text, self.pos if offset is None else offset
        )

    def skip_whitespace_and_comments(self) -> None:
        """Skip whitespace, newlines and comments (from # to end of line)."""
        while True:
            ch = self.current_char()
            if ch is not None and ch.isspace():
                self.advance()
            elif ch == "#":
                while self.current_char() not in (None, "\n"):
                    self.advance()
            else:
                return

    def emit(self, token_type: TokenType, value: str, start: int, line: int, column: int) -> None:
        self.tokens.append(Token(token_type, value, line, column, start, self.pos))

    def read_quoted(self, quote: str, what: str) -> str:
        """
        Read a string or regex literal body.

        Backslash escapes are kept verbatim for regex literals and
        unescaped for string literals.
        """
        start = self.pos
        self.advance()  # skip opening delimiter

        chars = []
        while True:
            current = self.current_char()
            if current is None or current == quote:
                break
            if current == "\n" and quote == "/":
                break

            if current == "\\":
                self.advance()
                escape_char = self.current_char()
                if escape_char is None:
                    break
                if quote == "/":
                    chars.append("\\" + escape_char)
                elif escape_char == "n":
                    chars.append("\n")
                elif escape_char == "t":
                    chars.append("\t")
                else:
                    chars.append(escape_char)
                self.advance()
            else:
                chars.append(current)
                self.advance()

        if self.current_char() != quote:
            raise self.error(f"Unterminated {what} literal", start)

        self.advance()  # skip closing delimiter
        return "".join(chars)

    def is_identifier_start(self, ch: str | None) -> bool:
        return ch is not None and (ch.isalpha() or ch == "_")

    def is_identifier_char(self, ch: str | None) -> bool:
        return ch is not None and (ch.isalnum() or ch == "_")

    def read_identifier(self) -> str:
        """
        Read an identifier.

        Identifiers may contain inner hyphens (``statement-list``) and
        ``::`` qualifiers (``ORJS::Grammar``). A trailing hyphen is not
        consumed so ``a -`` and ``a-`` both leave the marker alone.
        """
        chars = []
        while True:
            current = self.current_char()
            if self.is_identifier_char(current):
                chars.append(current)
                self.advance()
            elif current == "-" and self.is_identifier_char(self.peek_char()):
                chars.append(current)
                self.advance()
            elif (
                current == ":"
                and self.peek_char() == ":"
                and self.is_identifier_start(self.peek_char(2))
            ):
                chars.append("::")
                self.advance()
                self.advance()
            else:
                return "".join(chars)

    def previous_is_attachable(self) -> bool:
        """True if the last token ends exactly here and can take a quantifier."""
        if not self.tokens:
            return False
        last = self.tokens[-1]
        return last.end == self.pos and last.type in (
            TokenType.IDENTIFIER,
            TokenType.STRING,
            TokenType.REGEX,
            TokenType.RPAREN,
            TokenType.PLUS,
            TokenType.MINUS,
        )

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with EOF

        Raises:
            ParseError: If an unexpected character or unterminated literal is found
        """
        while True:
            self.skip_whitespace_and_comments()

            ch = self.current_char()
            if ch is None:
                break

            # Save position for token
            start = self.pos
            line = self.line
            column = self.column

            if self.is_identifier_start(ch):
                value = self.read_identifier()
                self.emit(TokenType.IDENTIFIER, value, start, line, column)

            elif ch in MODIFIER_CHARS:
                while self.current_char() is not None and self.current_char() in MODIFIER_CHARS:
                    self.advance()
                if not self.is_identifier_start(self.current_char()):
                    raise self.error(f"Expected rule name after {self.text[start:self.pos]!r}")
                self.emit(TokenType.MODIFIER, self.text[start : self.pos], start, line, column)

            elif ch in ('"', "'"):
                value = self.read_quoted(ch, "string")
                self.emit(TokenType.STRING, value, start, line, column)

            elif ch == "/":
                value = self.read_quoted("/", "regex")
                self.emit(TokenType.REGEX, value, start, line, column)

            elif ch == "(":
                quant = QUANTIFIER_PATTERN.match(self.text, self.pos)
                if quant and self.previous_is_attachable():
                    for _ in range(quant.end() - quant.start()):
                        self.advance()
                    self.emit(TokenType.QUANTIFIER, quant.group(1), start, line, column)
                else:
                    self.advance()
                    self.emit(TokenType.LPAREN, "(", start, line, column)

            elif ch == ")":
                self.advance()
                self.emit(TokenType.RPAREN, ")", start, line, column)

            elif ch == "%":
                self.advance()
                if self.current_char() == "%":
                    self.advance()
                self.emit(TokenType.SEPARATOR, self.text[start : self.pos], start, line, column)

            elif ch == ":":
                self.advance()
                self.emit(TokenType.COLON, ":", start, line, column)

            elif ch == ";":
                self.advance()
                self.emit(TokenType.SEMICOLON, ";", start, line, column)

            elif ch == "|":
                self.advance()
                self.emit(TokenType.PIPE, "|", start, line, column)

            elif ch == "+":
                self.advance()
                self.emit(TokenType.PLUS, "+", start, line, column)

            elif ch == "-":
                self.advance()
                self.emit(TokenType.MINUS, "-", start, line, column)

            else:
                raise self.error(f"Unexpected character: {ch!r}")

        self.emit(TokenType.EOF, "", self.pos, self.line, self.column)
        return self.tokens


def tokenize(text: str, source: str = "<grammar>") -> list[Token]:
    """
    Convenience function to tokenize grammar text.

    Args:
        text: Source text
        source: Document name or URI

    Returns:
        List of tokens
    """
    lexer = Lexer(text, source)
    return lexer.tokenize()
