"""Facade that resolves bindings, single shapes and batches of shapes."""

from typing import TYPE_CHECKING, Iterable, List, Optional

from ..expr.errors import DiagnosticCollector
from ..expr.evaluator import ExpressionEngine
from .base import Binding

if TYPE_CHECKING:
    from ..parameters import ParameterStore
    from ..shapes.base import Shape


class BindingResolver:
    """
    Resolves bindings against one parameter store and expression engine.

    Recoverable warnings raised during resolution accumulate in
    ``diagnostics``; hard failures propagate to the caller.
    """

    def __init__(self, parameter_store: "ParameterStore",
                 engine: Optional[ExpressionEngine] = None,
                 diagnostics: Optional[DiagnosticCollector] = None):
        self.parameter_store = parameter_store
        self.engine = engine or ExpressionEngine()
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()

    def resolve_value(self, binding: Binding) -> float:
        return binding.resolve(self.parameter_store, self.engine, self.diagnostics)

    def resolve_shape(self, shape: "Shape") -> "Shape":
        """Return a resolved clone of ``shape``; the original is untouched."""
        return shape.resolve(self.parameter_store, self)

    def resolve_all(self, shapes: Iterable["Shape"]) -> List["Shape"]:
        return [self.resolve_shape(shape) for shape in shapes]
