"""
Abstract Syntax Tree (AST) node definitions for parameter expressions.

The AST is a small Composite tree:
- Leaf nodes:   Number, ParameterRef
- Branch nodes: BinaryOp, FunctionCall

Unary negation has no node of its own: the parser lowers ``-x`` to
``BinaryOp('*', Number(-1), x)``.

Nodes are frozen, so a parsed tree can be cached by a binding and shared
across any number of evaluations.  Source spans are carried for error
reporting but ignored by equality, so two parses of the same text compare
equal regardless of whitespace.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple
from abc import ABC

from .tokens import SourceSpan


# =============================================================================
# Base Classes
# =============================================================================

class AstNode(ABC):
    """Base class for all AST nodes."""

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class Number(AstNode):
    """A numeric literal."""
    value: float
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ParameterRef(AstNode):
    """A reference to a parameter by name."""
    name: str
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class BinaryOp(AstNode):
    """A binary arithmetic operation; ``op`` is one of ``+ - * /``."""
    op: str
    left: AstNode
    right: AstNode
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class FunctionCall(AstNode):
    """A call to a whitelisted math function, e.g. ``min(a, b)``."""
    name: str
    args: Tuple[AstNode, ...] = ()
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


# =============================================================================
# Helpers
# =============================================================================

class _ParameterCollector(AstVisitor):
    """Collects referenced parameter names in first-use order."""

    def __init__(self):
        self.names = []

    def visit_Number(self, node: Number) -> None:
        pass

    def visit_ParameterRef(self, node: ParameterRef) -> None:
        if node.name not in self.names:
            self.names.append(node.name)

    def visit_BinaryOp(self, node: BinaryOp) -> None:
        node.left.accept(self)
        node.right.accept(self)

    def visit_FunctionCall(self, node: FunctionCall) -> None:
        for arg in node.args:
            arg.accept(self)


def referenced_parameters(node: AstNode) -> Tuple[str, ...]:
    """Return the parameter names an expression depends on."""
    collector = _ParameterCollector()
    node.accept(collector)
    return tuple(collector.names)


def format_ast(node: AstNode, indent: int = 0) -> str:
    """Pretty-print an AST for debugging."""
    prefix = "  " * indent

    if isinstance(node, Number):
        return f"{prefix}Number({node.value:g})"
    if isinstance(node, ParameterRef):
        return f"{prefix}ParameterRef({node.name})"
    if isinstance(node, BinaryOp):
        lines = [f"{prefix}BinaryOp({node.op})"]
        lines.append(format_ast(node.left, indent + 1))
        lines.append(format_ast(node.right, indent + 1))
        return "\n".join(lines)
    if isinstance(node, FunctionCall):
        lines = [f"{prefix}FunctionCall({node.name})"]
        for arg in node.args:
            lines.append(format_ast(arg, indent + 1))
        return "\n".join(lines)
    return f"{prefix}{node!r}"
