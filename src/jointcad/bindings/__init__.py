"""
Bindings: symbolic value sources for shape properties.

Usage:
    from jointcad.bindings import BindingResolver, create_binding_from_json

    binding = create_binding_from_json({"type": "expression", "expression": "width / 2"})
    value = BindingResolver(store).resolve_value(binding)
"""

from .base import (
    Binding,
    BindingError,
    ExpressionBinding,
    InvalidBindingJSON,
    LiteralBinding,
    MissingResolver,
    ParameterBinding,
)
from .handlers import (
    BindingHandler,
    ClampHandler,
    HandlerRegistry,
    HandlerResult,
    MapRangeHandler,
    ProcessedBinding,
    RoundHandler,
    ScaleHandler,
    ValidationHandler,
    default_handler_registry,
)
from .registry import (
    BindingRegistry,
    UnknownBindingType,
    create_binding_from_json,
    default_registry,
)
from .resolver import BindingResolver

__all__ = [
    "Binding", "LiteralBinding", "ParameterBinding", "ExpressionBinding",
    "BindingError", "InvalidBindingJSON", "MissingResolver", "UnknownBindingType",
    "BindingHandler", "HandlerResult", "ValidationHandler", "ClampHandler",
    "RoundHandler", "ScaleHandler", "MapRangeHandler", "HandlerRegistry",
    "ProcessedBinding", "default_handler_registry",
    "BindingRegistry", "default_registry", "create_binding_from_json",
    "BindingResolver",
]
