"""
Expression-specific exceptions and diagnostics.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Evaluation errors
- W2xx: Recoverable warnings (missing parameters, rejected values)

Hard failures are raised as ``ExpressionError`` subclasses.  Recoverable
conditions never raise: they are reported as WARNING diagnostics so that a
shape keeps rendering while the user is mid-edit.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional
from .tokens import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class Diagnostic:
    """A single diagnostic message (error, warning, etc.)."""
    code: str                       # E001, E101, W201, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    source: Optional[str] = None    # The expression text, when known
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        header = f"{self.severity.value}[{self.code}]: {self.message}"
        if self.span is not None:
            header = f"{self.span.start}: {header}"
        parts.append(header)

        # Source line with caret
        if show_source and self.source is not None and self.span is not None:
            col = self.span.start.column
            underline_len = max(1, self.span.end.column - col)
            parts.append(f"  | {self.source}")
            parts.append(f"  | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"  = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        data = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.span is not None:
            data["range"] = {
                "start": self.span.start.offset,
                "end": self.span.end.offset,
            }
        return data


class ExpressionError(Exception):
    """Base exception for expression errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.format()


class ParseError(ExpressionError):
    """Malformed expression text (E0xx, E1xx)."""
    pass


class EvaluationError(ExpressionError):
    """Error while evaluating a parsed expression (E2xx)."""
    pass


class DivisionByZero(EvaluationError):
    """Division by zero (E201)."""
    pass


class UnknownFunction(EvaluationError):
    """Call to a function outside the supported whitelist (E202)."""
    pass


class ArityError(EvaluationError):
    """Wrong number of arguments to a supported function (E203)."""
    pass


class DomainError(EvaluationError):
    """Argument outside a function's domain, e.g. sqrt(-1) (E204)."""
    pass


def _error(code: str, message: str, span: Optional[SourceSpan] = None,
           source: Optional[str] = None, hints: Optional[List[str]] = None) -> Diagnostic:
    return Diagnostic(
        code=code,
        message=message,
        severity=ErrorSeverity.ERROR,
        span=span,
        source=source,
        hints=hints or [],
    )


# --- Lexer error codes ---

def error_unexpected_character(char: str, span: SourceSpan, source: str = None) -> ParseError:
    """E001: Unexpected character."""
    return ParseError(_error(
        "E001", f"unexpected character '{char}' at position {span.start.offset}",
        span, source,
    ))


# --- Parser error codes ---

def error_empty_expression() -> ParseError:
    """E100: Empty expression."""
    return ParseError(_error("E100", "expression cannot be empty"))


def error_unexpected_token(expected: str, found: str, span: SourceSpan,
                           source: str = None) -> ParseError:
    """E101: Unexpected token."""
    return ParseError(_error("E101", f"expected {expected}, found {found}", span, source))


def error_unexpected_end(expected: str, span: SourceSpan, source: str = None) -> ParseError:
    """E102: Unexpected end of expression."""
    return ParseError(_error(
        "E102", f"unexpected end of expression, expected {expected}", span, source,
    ))


def error_unmatched_parenthesis(span: SourceSpan, source: str = None) -> ParseError:
    """E103: Unmatched parenthesis."""
    return ParseError(_error(
        "E103", "unmatched parenthesis", span, source,
        hints=["every '(' must be closed by a matching ')'"],
    ))


def error_trailing_input(text: str, span: SourceSpan, source: str = None) -> ParseError:
    """E104: Input left over after a complete expression."""
    return ParseError(_error(
        "E104", f"unexpected characters after expression: '{text}'", span, source,
    ))


# --- Evaluation error codes ---

def error_missing_ast() -> EvaluationError:
    """E200: Evaluate called without an AST."""
    return EvaluationError(_error("E200", "an AST is required for evaluation"))


def error_unknown_operator(op: str, span: Optional[SourceSpan] = None) -> EvaluationError:
    """E205: Operator outside + - * / (only reachable with hand-built ASTs)."""
    return EvaluationError(_error("E205", f"unknown operator '{op}'", span))


def error_division_by_zero(span: Optional[SourceSpan] = None) -> DivisionByZero:
    """E201: Division by zero."""
    return DivisionByZero(_error("E201", "division by zero", span))


def error_unknown_function(name: str, available: Iterable[str],
                           span: Optional[SourceSpan] = None) -> UnknownFunction:
    """E202: Unknown function."""
    options = ", ".join(available)
    return UnknownFunction(_error(
        "E202", f"unknown function '{name}'. Supported functions: {options}",
        span, hints=[f"supported functions: {options}"],
    ))


def error_arity(name: str, expected: str, found: int,
                span: Optional[SourceSpan] = None) -> ArityError:
    """E203: Wrong number of arguments."""
    return ArityError(_error(
        "E203", f"{name}() requires {expected}, got {found}", span,
    ))


def error_domain(name: str, message: str, span: Optional[SourceSpan] = None) -> DomainError:
    """E204: Argument outside function domain."""
    return DomainError(_error("E204", f"{name}() {message}", span))


# --- Warnings ---

def warning_missing_parameter(name: str, span: Optional[SourceSpan] = None) -> Diagnostic:
    """W201: Parameter name not present in the evaluation context."""
    return Diagnostic(
        code="W201",
        message=f"parameter '{name}' not found in context, using 0",
        severity=ErrorSeverity.WARNING,
        span=span,
        hints=["the parameter may have been renamed or deleted"],
    )


def warning_missing_parameter_id(parameter_id: str) -> Diagnostic:
    """W202: Parameter binding refers to an id absent from the store."""
    return Diagnostic(
        code="W202",
        message=f"parameter {parameter_id} not found, returning 0",
        severity=ErrorSeverity.WARNING,
    )


def warning_value_rejected(message: str) -> Diagnostic:
    """W203: A binding handler rejected the resolved value."""
    return Diagnostic(
        code="W203",
        message=f"binding validation failed: {message}",
        severity=ErrorSeverity.WARNING,
    )


class DiagnosticCollector:
    """
    Accumulates the warnings raised while resolving bindings.

    Hard failures are raised as ``ExpressionError`` and never land here.
    """

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == ErrorSeverity.WARNING]
