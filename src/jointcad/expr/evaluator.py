"""
Tree-walking evaluator for parameter expressions.

``Evaluator`` visits an AST against a name -> number context.
``ExpressionEngine`` is the stateless facade used by bindings: parse once,
cache the AST, evaluate as often as parameters change.
"""

import logging
from typing import Mapping, Optional, Sequence

from .ast import AstNode, AstVisitor, Number, ParameterRef, BinaryOp, FunctionCall, referenced_parameters
from .errors import (
    DiagnosticCollector,
    DomainError,
    error_missing_ast,
    error_unknown_operator,
    error_division_by_zero,
    error_unknown_function,
    error_arity,
    warning_missing_parameter,
)
from .functions import FunctionRegistry, get_function_registry
from .parser import parse as parse_source

logger = logging.getLogger(__name__)


class Evaluator(AstVisitor):
    """
    Evaluates an AST to a float.

    A parameter name missing from the context evaluates to 0 and is reported
    as a W201 warning (logged, and added to ``diagnostics`` when given).
    """

    def __init__(self, context: Mapping[str, float],
                 functions: Optional[FunctionRegistry] = None,
                 diagnostics: Optional[DiagnosticCollector] = None):
        self.context = context
        self.functions = functions or get_function_registry()
        self.diagnostics = diagnostics

    def evaluate(self, node: AstNode) -> float:
        return node.accept(self)

    def visit_Number(self, node: Number) -> float:
        return node.value

    def visit_ParameterRef(self, node: ParameterRef) -> float:
        value = self.context.get(node.name)
        if value is None:
            logger.warning("Parameter '%s' not found in context, using 0", node.name)
            if self.diagnostics is not None:
                self.diagnostics.add(warning_missing_parameter(node.name, node.span))
            return 0.0
        return float(value)

    def visit_BinaryOp(self, node: BinaryOp) -> float:
        left = node.left.accept(self)
        right = node.right.accept(self)

        if node.op == '+':
            return left + right
        elif node.op == '-':
            return left - right
        elif node.op == '*':
            return left * right
        elif node.op == '/':
            if right == 0:
                raise error_division_by_zero(node.span)
            return left / right

        raise error_unknown_operator(node.op, node.span)

    def visit_FunctionCall(self, node: FunctionCall) -> float:
        func = self.functions.get_function(node.name)
        if func is None:
            raise error_unknown_function(node.name, self.functions.names(), node.span)
        if not func.accepts(len(node.args)):
            raise error_arity(node.name, func.describe_arity(), len(node.args), node.span)

        args = [arg.accept(self) for arg in node.args]
        try:
            return float(func.implementation(*args))
        except DomainError as exc:
            if exc.diagnostic.span is None:
                exc.diagnostic.span = node.span
            raise


class ExpressionEngine:
    """
    Compiles expression strings to ASTs and evaluates them.

    The engine holds no per-expression state; callers cache the AST returned
    by ``parse`` and pass it back to ``evaluate`` with a fresh context.

    Usage:
        engine = ExpressionEngine()
        ast = engine.parse("width * 2 + offset")
        engine.evaluate(ast, {"width": 10, "offset": 3})   # 23.0
    """

    def __init__(self, functions: Optional[FunctionRegistry] = None):
        self.functions = functions or get_function_registry()

    @property
    def supported_functions(self) -> Sequence[str]:
        return tuple(self.functions.names())

    def parse(self, source: str) -> AstNode:
        """Parse expression text; raises ParseError when malformed."""
        return parse_source(source)

    def evaluate(self, ast: Optional[AstNode], context: Optional[Mapping[str, float]] = None,
                 diagnostics: Optional[DiagnosticCollector] = None) -> float:
        """Evaluate a parsed AST against a name -> value context."""
        if ast is None:
            raise error_missing_ast()
        return Evaluator(context or {}, self.functions, diagnostics).evaluate(ast)

    def evaluate_source(self, source: str, context: Optional[Mapping[str, float]] = None,
                        diagnostics: Optional[DiagnosticCollector] = None) -> float:
        """Parse and evaluate in one step (no caching)."""
        return self.evaluate(self.parse(source), context, diagnostics)

    def parameter_names(self, source_or_ast) -> Sequence[str]:
        """Parameter names referenced by an expression."""
        ast = self.parse(source_or_ast) if isinstance(source_or_ast, str) else source_or_ast
        return referenced_parameters(ast)
