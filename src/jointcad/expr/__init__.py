"""
jointcad parameter expression language.

This module provides:
- Lexer: Tokenizes expression text
- Parser: Builds an AST with standard arithmetic precedence
- Evaluator / ExpressionEngine: Evaluates ASTs against parameter values

Usage:
    from jointcad.expr import ExpressionEngine

    engine = ExpressionEngine()
    ast = engine.parse("max(width, 10) / 2 - sqrt(inset)")
    value = engine.evaluate(ast, {"width": 24, "inset": 4})   # 10.0
"""

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .ast import (
    AstNode,
    AstVisitor,
    Number,
    ParameterRef,
    BinaryOp,
    FunctionCall,
    format_ast,
    referenced_parameters,
)

from .parser import (
    Parser,
    parse,
)

from .functions import (
    BuiltinFunction,
    FunctionRegistry,
    get_function_registry,
)

from .evaluator import (
    Evaluator,
    ExpressionEngine,
)

from .errors import (
    ExpressionError,
    ParseError,
    EvaluationError,
    DivisionByZero,
    UnknownFunction,
    ArityError,
    DomainError,
    Diagnostic,
    DiagnosticCollector,
    ErrorSeverity,
)


__all__ = [
    # Tokens
    "Token", "TokenType", "SourceLocation", "SourceSpan",
    # Lexer / parser
    "Lexer", "tokenize", "Parser", "parse",
    # AST
    "AstNode", "AstVisitor", "Number", "ParameterRef", "BinaryOp", "FunctionCall",
    "format_ast", "referenced_parameters",
    # Evaluation
    "BuiltinFunction", "FunctionRegistry", "get_function_registry",
    "Evaluator", "ExpressionEngine",
    # Errors
    "ExpressionError", "ParseError", "EvaluationError", "DivisionByZero",
    "UnknownFunction", "ArityError", "DomainError",
    "Diagnostic", "DiagnosticCollector", "ErrorSeverity",
]
