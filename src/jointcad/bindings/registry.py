"""
Binding registry: maps a serialized ``type`` tag to a factory.

The built-in kinds (``literal``, ``parameter``, ``expression``,
``processed``) are seeded on construction; plugins add their own with
``register`` without touching the dispatch in ``create_from_json``.
"""

from typing import Callable, Dict, List, Optional

from .base import (
    Binding,
    BindingError,
    ExpressionBinding,
    InvalidBindingJSON,
    LiteralBinding,
    ParameterBinding,
)
from .handlers import HandlerRegistry, ProcessedBinding, default_handler_registry

BindingFactory = Callable[[dict], Binding]


class UnknownBindingType(BindingError):
    """Serialized binding carries a type tag nobody registered."""

    def __init__(self, binding_type, available: List[str]):
        self.binding_type = binding_type
        self.available = list(available)
        super().__init__(
            f'Unknown binding type: "{binding_type}". '
            f'Available types: {", ".join(self.available)}'
        )


class BindingRegistry:
    """Factory registry for binding kinds."""

    def __init__(self, handler_registry: Optional[HandlerRegistry] = None):
        self._factories: Dict[str, BindingFactory] = {}
        self.handler_registry = handler_registry or default_handler_registry
        self._register_all()

    def register(self, binding_type: str, factory: BindingFactory) -> None:
        if not binding_type:
            raise BindingError("Binding type must be a non-empty string")
        if not callable(factory):
            raise BindingError(f"Factory for binding type '{binding_type}' must be callable")
        self._factories[binding_type] = factory

    def unregister(self, binding_type: str) -> bool:
        return self._factories.pop(binding_type, None) is not None

    def is_registered(self, binding_type: str) -> bool:
        return binding_type in self._factories

    def available_types(self) -> List[str]:
        return list(self._factories)

    def create_from_json(self, data: dict) -> Binding:
        if not isinstance(data, dict) or "type" not in data:
            raise InvalidBindingJSON("Binding JSON must be an object with a 'type' field")
        factory = self._factories.get(data["type"])
        if factory is None:
            raise UnknownBindingType(data["type"], self.available_types())
        return factory(data)

    def _register_all(self) -> None:
        self.register("literal", _literal_from_json)
        self.register("parameter", _parameter_from_json)
        self.register("expression", _expression_from_json)
        self.register("processed", lambda data: ProcessedBinding.from_json(
            data, self.create_from_json, self.handler_registry))


def _literal_from_json(data: dict) -> LiteralBinding:
    value = data.get("value", 0)
    try:
        return LiteralBinding(float(value))
    except (TypeError, ValueError):
        raise InvalidBindingJSON(f"literal binding value must be a number, got {value!r}") from None


def _parameter_from_json(data: dict) -> ParameterBinding:
    if not data.get("parameterId"):
        raise InvalidBindingJSON("parameter binding requires parameterId")
    return ParameterBinding(data["parameterId"])


def _expression_from_json(data: dict) -> ExpressionBinding:
    expression = data.get("expression")
    if not expression or not isinstance(expression, str):
        raise InvalidBindingJSON("expression binding requires expression")
    return ExpressionBinding(expression)


default_registry = BindingRegistry()


def create_binding_from_json(data: dict) -> Binding:
    """Deserialize a binding with the default registry."""
    return default_registry.create_from_json(data)
