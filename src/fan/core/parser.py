"""
Recursive descent parser for fan grammar documents.

Grammar of the notation (informal)::

    document    := 'unit' 'grammar' NAME ';' ruledef*
    ruledef     := IDENT ':' '|'? alternative ('|' alternative)* ';'?
    alternative := element+
    element     := primary (QUANTIFIER (SEPARATOR primary)?)?
    primary     := '+' | '-' | MODIFIER? IDENT | STRING | REGEX
                 | '(' alternative ')'

A rule definition ends at ``;``, at the next ``IDENT ':'`` or at the end
of input.
"""

from .errors import make_parse_error
from .ir import (
    GrammarDocument,
    LiteralForm,
    LiteralRule,
    MarkerKind,
    MarkerRule,
    Quantifier,
    QuantifierSeparator,
    ReferenceRule,
    Rule,
    RuleDef,
    RuleName,
    SequenceRule,
    Span,
)
from .lexer import Token, TokenType, tokenize

DEFAULT_MAX_DEPTH = 64

# Tokens that close an alternative
ALTERNATIVE_END = (TokenType.EOF, TokenType.PIPE, TokenType.SEMICOLON, TokenType.RPAREN)


class BaseParser:
    """
    Cursor over the lexer's token list for the grammar notation.

    The list always ends with an EOF token, and reading past the end keeps
    returning it. Every token carries start and end character offsets into
    text, and error() builds a ParseError pinned to the
    offending token's start offset. The notation has no reserved words:
    `unit` and `grammar` lex as identifiers and are consumed with
    expect_word().
    """

    def __init__(self, tokens: list[Token], text: str, source: str):
        self.tokens = tokens
        self.text = text
        self.source = source
        self.pos = 0

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def expect(self, token_type: TokenType, what: str | None = None) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ParseError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            raise self.error(f"Expected {what or token_type.value}, got {self.describe(token)}")
        return self.advance()

    def expect_word(self, word: str) -> Token:
        """Expect an identifier with a specific value (a contextual keyword)."""
        token = self.current_token()
        if token.type != TokenType.IDENTIFIER or token.value != word:
            raise self.error(f"Expected '{word}', got {self.describe(token)}")
        return self.advance()

    def describe(self, token: Token) -> str:
        if token.type == TokenType.EOF:
            return "end of input"
        if token.type in (TokenType.IDENTIFIER, TokenType.STRING, TokenType.REGEX):
            return f"{token.type.value.lower()} {token.value!r}"
        return f"'{self.text[token.start : token.end]}'"

    def error(self, message: str, token: Token | None = None):
        token = token or self.current_token()
        return make_parse_error(message, self.source, self.text, token.start)


class GrammarParser(BaseParser):
    """Parser producing a GrammarDocument."""

    def __init__(
        self,
        tokens: list[Token],
        text: str,
        source: str,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        super().__init__(tokens, text, source)
        self.max_depth = max_depth

    def parse(self) -> GrammarDocument:
        """
        Parse a complete grammar document.

        Raises:
            ParseError: If the header is missing or the body is malformed
        """
        self.expect_word("unit")
        self.expect_word("grammar")
        name = self.expect(TokenType.IDENTIFIER, "grammar name").value
        self.expect(TokenType.SEMICOLON, "';' after grammar name")

        rules: list[RuleDef] = []
        while not self.match(TokenType.EOF):
            rules.append(self.parse_ruledef())

        return GrammarDocument(name=name, span=Span(start=0, end=len(self.text)), rules=rules)

    def at_rule_start(self) -> bool:
        """True if the current tokens begin a new rule definition (``name:``)."""
        return (
            self.current_token().type == TokenType.IDENTIFIER
            and self.peek_token().type == TokenType.COLON
        )

    def parse_ruledef(self) -> RuleDef:
        if not self.at_rule_start():
            raise self.error(f"Expected rule definition, got {self.describe(self.current_token())}")

        name_token = self.advance()
        self.expect(TokenType.COLON)

        if self.match(TokenType.PIPE):
            self.advance()

        alternatives = [self.parse_alternative(depth=0)]
        while self.match(TokenType.PIPE):
            self.advance()
            alternatives.append(self.parse_alternative(depth=0))

        end = alternatives[-1].span.end
        if self.match(TokenType.SEMICOLON):
            end = self.advance().end

        return RuleDef(
            name=RuleName(
                text=name_token.value,
                span=Span(start=name_token.start, end=name_token.end),
            ),
            span=Span(start=name_token.start, end=end),
            alternatives=alternatives,
        )

    def parse_alternative(self, depth: int) -> SequenceRule:
        parts: list[Rule] = []
        while not self.match(*ALTERNATIVE_END) and not self.at_rule_start():
            parts.append(self.parse_element(depth))

        if not parts:
            raise self.error(f"Expected rule element, got {self.describe(self.current_token())}")

        return SequenceRule(
            span=Span(start=parts[0].span.start, end=parts[-1].span.end),
            parts=parts,
        )

    def parse_element(self, depth: int) -> Rule:
        rule = self.parse_primary(depth)

        if not self.match(TokenType.QUANTIFIER):
            return rule

        quant_token = self.advance()
        separator = None
        end = quant_token.end

        if self.match(TokenType.SEPARATOR):
            marker = self.advance()
            inner = self.parse_primary(depth)
            separator = QuantifierSeparator(
                span=Span(start=marker.start, end=inner.span.end),
                marker=marker.value,
                rule=inner,
            )
            end = separator.span.end

        quantifier = Quantifier(
            span=Span(start=quant_token.start, end=end),
            range=quant_token.value,
            separator=separator,
        )
        return rule.model_copy(
            update={
                "span": Span(start=rule.span.start, end=end),
                "quantifier": quantifier,
            }
        )

    def parse_primary(self, depth: int) -> Rule:
        token = self.current_token()
        span = Span(start=token.start, end=token.end)

        if token.type == TokenType.PLUS:
            self.advance()
            return MarkerRule(span=span, marker=MarkerKind.SIGNIFICANT_WS)

        if token.type == TokenType.MINUS:
            self.advance()
            return MarkerRule(span=span, marker=MarkerKind.INSIGNIFICANT_WS)

        if token.type == TokenType.MODIFIER:
            self.advance()
            name = self.current_token()
            if name.type != TokenType.IDENTIFIER or name.start != token.end:
                raise self.error(f"Expected rule name after {token.value!r}", name)
            self.advance()
            return ReferenceRule(
                span=Span(start=token.start, end=name.end),
                target=name.value,
                modifiers=token.value,
            )

        if token.type == TokenType.IDENTIFIER:
            self.advance()
            return ReferenceRule(span=span, target=token.value)

        if token.type == TokenType.STRING:
            self.advance()
            return LiteralRule(span=span, form=LiteralForm.STRING, value=token.value)

        if token.type == TokenType.REGEX:
            self.advance()
            return LiteralRule(span=span, form=LiteralForm.REGEX, value=token.value)

        if token.type == TokenType.LPAREN:
            if depth >= self.max_depth:
                raise self.error(f"Groups nested deeper than {self.max_depth} levels")
            self.advance()
            group = self.parse_alternative(depth + 1)
            if self.match(TokenType.PIPE):
                raise self.error("Alternatives are only allowed at the top level of a rule")
            closing = self.expect(TokenType.RPAREN, "')' to close group")
            return SequenceRule(span=Span(start=token.start, end=closing.end), parts=group.parts)

        raise self.error(f"Expected rule element, got {self.describe(token)}")


def parse_grammar(
    text: str,
    source: str = "<grammar>",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> GrammarDocument:
    """
    Parse grammar text into a GrammarDocument.

    Args:
        text: Grammar source text
        source: Document name or URI (for error reporting)
        max_depth: Maximum group nesting depth

    Returns:
        Parsed GrammarDocument

    Raises:
        ParseError: If the text is not a well-formed grammar document
    """
    tokens = tokenize(text, source)
    parser = GrammarParser(tokens, text, source, max_depth=max_depth)
    return parser.parse()
