"""
Recursive descent parser for parameter expressions.

Converts a token stream into an AST.  All parse state (the token list and
the cursor) lives on the ``Parser`` instance; each grammar production is a
method that advances the cursor, so individual productions can be driven
directly in tests.
"""

from typing import List, Optional

from .tokens import Token, TokenType, SourceSpan, operator_symbol
from .ast import AstNode, Number, ParameterRef, BinaryOp, FunctionCall
from .lexer import tokenize
from .errors import (
    error_empty_expression,
    error_unexpected_token,
    error_unexpected_end,
    error_unmatched_parenthesis,
    error_trailing_input,
)


class Parser:
    """
    Recursive descent parser for parameter expressions.

    Usage:
        parser = Parser(tokenize("2 + 3 * 4"), source="2 + 3 * 4")
        ast = parser.parse()

    Grammar, lowest to highest precedence:

        expression := additive
        additive   := term (('+' | '-') term)*
        term       := unary (('*' | '/') unary)*
        unary      := '-' unary | primary
        primary    := NUMBER
                    | IDENTIFIER '(' [expression (',' expression)*] ')'
                    | IDENTIFIER
                    | '(' expression ')'
    """

    ADDITIVE = (TokenType.PLUS, TokenType.MINUS)
    MULTIPLICATIVE = (TokenType.STAR, TokenType.SLASH)

    def __init__(self, tokens: List[Token], source: Optional[str] = None):
        self.tokens = tokens
        self.source = source
        self.pos = 0

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _is_at_end(self) -> bool:
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        return self._current().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self._current().type in token_types:
            return self._advance()
        return None

    def _error(self, expected: str) -> None:
        """Raise a parse error at the current token."""
        token = self._current()
        if token.type == TokenType.EOF:
            raise error_unexpected_end(expected, token.span, self.source)
        raise error_unexpected_token(expected, token.describe(), token.span, self.source)

    def _expect_closing_paren(self, opening: Token) -> Token:
        closing = self._match(TokenType.RPAREN)
        if closing is None:
            span = SourceSpan(opening.span.start, self._current().span.end)
            raise error_unmatched_parenthesis(span, self.source)
        return closing

    # =========================================================================
    # Productions
    # =========================================================================

    def parse(self) -> AstNode:
        """Parse a complete expression, rejecting trailing input."""
        if self._is_at_end():
            raise error_empty_expression()

        ast = self.parse_expression()

        if not self._is_at_end():
            token = self._current()
            if token.type == TokenType.RPAREN:
                raise error_unmatched_parenthesis(token.span, self.source)
            rest = self.source[token.span.start.offset:] if self.source else token.lexeme
            span = SourceSpan(token.span.start, self.tokens[-1].span.end)
            raise error_trailing_input(rest, span, self.source)

        return ast

    def parse_expression(self) -> AstNode:
        """Parse an expression (entry point for sub-expressions)."""
        return self.parse_additive()

    def parse_additive(self) -> AstNode:
        """Parse addition and subtraction (left-associative)."""
        left = self.parse_term()
        while True:
            op = self._match(*self.ADDITIVE)
            if op is None:
                return left
            right = self.parse_term()
            left = BinaryOp(
                op=operator_symbol(op.type),
                left=left,
                right=right,
                span=SourceSpan(left.span.start, right.span.end),
            )

    def parse_term(self) -> AstNode:
        """Parse multiplication and division (left-associative)."""
        left = self.parse_unary()
        while True:
            op = self._match(*self.MULTIPLICATIVE)
            if op is None:
                return left
            right = self.parse_unary()
            left = BinaryOp(
                op=operator_symbol(op.type),
                left=left,
                right=right,
                span=SourceSpan(left.span.start, right.span.end),
            )

    def parse_unary(self) -> AstNode:
        """Parse unary negation, lowered to multiplication by -1."""
        minus = self._match(TokenType.MINUS)
        if minus is None:
            return self.parse_primary()

        operand = self.parse_unary()
        return BinaryOp(
            op='*',
            left=Number(-1.0, span=minus.span),
            right=operand,
            span=SourceSpan(minus.span.start, operand.span.end),
        )

    def parse_primary(self) -> AstNode:
        """Parse numbers, parameter references, calls and groups."""
        token = self._current()

        if token.type == TokenType.NUMBER:
            self._advance()
            return Number(token.value, span=token.span)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            if self._check(TokenType.LPAREN):
                return self._parse_call(token)
            return ParameterRef(token.value, span=token.span)

        if token.type == TokenType.LPAREN:
            opening = self._advance()
            node = self.parse_expression()
            self._expect_closing_paren(opening)
            return node

        self._error("number, parameter name, function call or '('")

    def _parse_call(self, name: Token) -> FunctionCall:
        """Parse the argument list of a function call."""
        opening = self._advance()  # consume '('
        args = []

        if not self._check(TokenType.RPAREN):
            args.append(self.parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self.parse_expression())

        closing = self._expect_closing_paren(opening)
        return FunctionCall(
            name=name.value.lower(),
            args=tuple(args),
            span=SourceSpan(name.span.start, closing.span.end),
        )


def parse(source: str) -> AstNode:
    """
    Convenience function to tokenize and parse an expression string.

    Raises:
        ParseError: If the text is empty or malformed
    """
    if source is None or not isinstance(source, str) or not source.strip():
        raise error_empty_expression()
    return Parser(tokenize(source), source).parse()
