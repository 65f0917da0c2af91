"""
Token types for the jointcad expression lexer.

The expression language is deliberately tiny: numbers, identifiers,
the four arithmetic operators, parentheses and the argument comma.

Token type categories follow the error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Evaluation errors
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """All token types recognized by the expression lexer."""

    # --- Literals ---
    NUMBER = auto()             # 42, 3.14, .5

    # --- Identifiers ---
    IDENTIFIER = auto()         # parameter names and function names

    # --- Arithmetic operators ---
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # *
    SLASH = auto()              # /

    # --- Delimiters ---
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    COMMA = auto()              # ,

    # --- Special ---
    EOF = auto()                # end of input


# Single-character tokens
SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ',': TokenType.COMMA,
}

# Operator token -> the symbol stored on BinaryOp nodes
OPERATOR_SYMBOLS = {
    TokenType.PLUS: '+',
    TokenType.MINUS: '-',
    TokenType.STAR: '*',
    TokenType.SLASH: '/',
}


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in an expression string."""
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start

    def __str__(self) -> str:
        return f"col {self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in an expression string."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        return f"{self.start.column}-{self.end.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Any              # float for NUMBER, str for IDENTIFIER
    lexeme: str             # The original source text
    span: SourceSpan        # Location in source

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.IDENTIFIER):
            return f"{self.type.name}({self.value!r})"
        return self.type.name

    def describe(self) -> str:
        """Short human-readable description for error messages."""
        if self.type == TokenType.EOF:
            return "end of expression"
        return f"'{self.lexeme}'"


def operator_symbol(token_type: TokenType) -> Optional[str]:
    """Return the arithmetic symbol for an operator token, or None."""
    return OPERATOR_SYMBOLS.get(token_type)
