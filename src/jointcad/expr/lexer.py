"""
Lexer for jointcad parameter expressions.

Converts expression text into a stream of tokens for the parser.
Supports:
- Decimal number literals (``12``, ``3.5``, ``.25``, ``4.``)
- Identifiers (ASCII letters, digits and ``_``; not starting with a digit)
- The operators ``+ - * /``, parentheses and the argument comma
- Arbitrary whitespace between tokens
"""

from typing import List, Iterator
from .tokens import Token, TokenType, SourceLocation, SourceSpan, SINGLE_CHAR_TOKENS
from .errors import error_unexpected_character


def _is_letter(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Lexer:
    """
    Tokenizer for parameter expressions.

    Usage:
        lexer = Lexer("width * 2 + offset")
        tokens = lexer.tokenize()

    Or for streaming:
        for token in Lexer(source):
            process(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0            # Current position in source

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.pos + 1, self.pos)

    def _span(self, start: SourceLocation) -> SourceSpan:
        """Create a span from start to current position."""
        return SourceSpan(start, self._location())

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_whitespace(self) -> None:
        while not self._is_at_end() and self._peek().isspace():
            self._advance()

    def _make_token(self, token_type: TokenType, value, start: SourceLocation) -> Token:
        lexeme = self.source[start.offset:self.pos]
        return Token(token_type, value, lexeme, self._span(start))

    def _scan_number(self) -> Token:
        """Scan a decimal literal with an optional fractional part."""
        start = self._location()

        while _is_digit(self._peek()):
            self._advance()

        if self._peek() == '.':
            self._advance()  # consume '.'
            while _is_digit(self._peek()):
                self._advance()

        lexeme = self.source[start.offset:self.pos]
        if lexeme == '.':
            raise error_unexpected_character('.', self._span(start), self.source)
        return self._make_token(TokenType.NUMBER, float(lexeme), start)

    def _scan_identifier(self) -> Token:
        """Scan an identifier (parameter or function name)."""
        start = self._location()
        while _is_letter(self._peek()) or _is_digit(self._peek()):
            self._advance()
        lexeme = self.source[start.offset:self.pos]
        return self._make_token(TokenType.IDENTIFIER, lexeme, start)

    def _scan_token(self) -> Token:
        """Scan the next token."""
        self._skip_whitespace()

        if self._is_at_end():
            start = self._location()
            return Token(TokenType.EOF, None, "", SourceSpan(start, start))

        ch = self._peek()

        if _is_digit(ch) or ch == '.':
            return self._scan_number()

        if _is_letter(ch):
            return self._scan_identifier()

        token_type = SINGLE_CHAR_TOKENS.get(ch)
        if token_type is not None:
            start = self._location()
            self._advance()
            return self._make_token(token_type, ch, start)

        start = self._location()
        self._advance()
        raise error_unexpected_character(ch, self._span(start), self.source)

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        tokens = []
        while True:
            token = self._scan_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        return tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens."""
        while True:
            token = self._scan_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str) -> List[Token]:
    """
    Convenience function to tokenize an expression.

    Raises:
        ParseError: If an unexpected character is found
    """
    return Lexer(source).tokenize()
