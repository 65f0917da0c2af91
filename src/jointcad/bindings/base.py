"""
Binding value sources.

A binding is what a bindable shape property holds instead of a plain number:

- ``LiteralBinding``: a stored constant
- ``ParameterBinding``: the current value of a parameter, by id
- ``ExpressionBinding``: a formula over parameter names

``resolve`` turns a binding into a number.  Missing parameters degrade to 0
with a warning; a structurally broken setup (no store, no engine) raises.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from ..expr.ast import AstNode
from ..expr.errors import DiagnosticCollector, warning_missing_parameter_id

if TYPE_CHECKING:
    from ..expr.evaluator import ExpressionEngine
    from ..parameters import ParameterStore

logger = logging.getLogger(__name__)


class BindingError(Exception):
    """Base class for binding failures."""
    pass


class InvalidBindingJSON(BindingError):
    """Serialized binding is missing a required field."""
    pass


class MissingResolver(BindingError):
    """A required collaborator (parameter store or engine) was not supplied."""
    pass


class Binding(ABC):
    """A symbolic value source for a shape property."""

    type: str = "base"

    @abstractmethod
    def resolve(self, parameter_store: Optional["ParameterStore"] = None,
                engine: Optional["ExpressionEngine"] = None,
                diagnostics: Optional[DiagnosticCollector] = None) -> float:
        """Produce the concrete number for this binding."""

    @abstractmethod
    def to_json(self) -> dict:
        """Serialize to the ``{"type": ..., ...}`` binding format."""


@dataclass
class LiteralBinding(Binding):
    value: float = 0.0
    type = "literal"

    def resolve(self, parameter_store=None, engine=None, diagnostics=None) -> float:
        return self.value

    def to_json(self) -> dict:
        return {"type": self.type, "value": self.value}


@dataclass
class ParameterBinding(Binding):
    parameter_id: str = ""
    type = "parameter"

    def resolve(self, parameter_store=None, engine=None, diagnostics=None) -> float:
        if parameter_store is None:
            raise MissingResolver("ParameterBinding requires a parameter store")
        param = parameter_store.get(self.parameter_id)
        if param is None:
            logger.warning("Parameter %s not found, returning 0", self.parameter_id)
            if diagnostics is not None:
                diagnostics.add(warning_missing_parameter_id(self.parameter_id))
            return 0.0
        return param.get_value()

    def to_json(self) -> dict:
        return {"type": self.type, "parameterId": self.parameter_id}


@dataclass
class ExpressionBinding(Binding):
    """
    A formula over parameter names.

    The parsed AST is cached on first resolution and reused until the
    expression text is replaced.
    """
    expression: str = ""
    _cached_ast: Optional[AstNode] = field(default=None, init=False, repr=False, compare=False)
    _cached_source: Optional[str] = field(default=None, init=False, repr=False, compare=False)
    type = "expression"

    def compile(self, engine: "ExpressionEngine") -> AstNode:
        if self._cached_ast is None or self._cached_source != self.expression:
            self._cached_ast = engine.parse(self.expression)
            self._cached_source = self.expression
        return self._cached_ast

    def resolve(self, parameter_store=None, engine=None, diagnostics=None) -> float:
        if parameter_store is None or engine is None:
            raise MissingResolver(
                "ExpressionBinding requires both a parameter store and an expression engine"
            )
        ast = self.compile(engine)
        context = {param.name: param.get_value() for param in parameter_store.get_all()}
        return engine.evaluate(ast, context, diagnostics)

    def to_json(self) -> dict:
        return {"type": self.type, "expression": self.expression}
