"""Shape registry: type tag -> shape class, with readable id generation."""

import re
from typing import Dict, Iterable, List, Optional, Type

from ..bindings.registry import BindingRegistry
from .base import Shape, ShapeError
from .primitives import PathShape, Polygon, Rectangle


class ShapeRegistry:
    """
    Creates shapes by type name and restores them from JSON.

    Generated ids are ``{type}-{n}`` with a counter per type, e.g.
    ``rectangle-1``, ``rectangle-2``.
    """

    def __init__(self, binding_registry: Optional[BindingRegistry] = None):
        self._shapes: Dict[str, Type[Shape]] = {}
        self._counters: Dict[str, int] = {}
        self.binding_registry = binding_registry
        self._register_all()

    def register(self, shape_type: str, shape_cls: Type[Shape]) -> None:
        if not issubclass(shape_cls, Shape):
            raise ShapeError(f"{shape_cls!r} is not a Shape subclass")
        self._shapes[shape_type.lower()] = shape_cls

    def is_registered(self, shape_type: str) -> bool:
        return shape_type.lower() in self._shapes

    def available_types(self) -> List[str]:
        return list(self._shapes)

    def _lookup(self, shape_type) -> Type[Shape]:
        shape_cls = self._shapes.get(str(shape_type).lower())
        if shape_cls is None:
            raise ShapeError(
                f'Unknown shape type: "{shape_type}". '
                f'Available types: {", ".join(self._shapes)}'
            )
        return shape_cls

    def generate_id(self, shape_type: str, existing_ids: Iterable[str] = ()) -> str:
        """Next free ``{type}-{n}`` id, skipping numbers already in use."""
        shape_type = shape_type.lower()
        counter = self._counters.get(shape_type, 0)
        pattern = re.compile(rf"^{re.escape(shape_type)}-(\d+)$")
        for existing in existing_ids:
            match = pattern.match(existing)
            if match:
                counter = max(counter, int(match.group(1)))
        counter += 1
        self._counters[shape_type] = counter
        return f"{shape_type}-{counter}"

    def reset_id_counters(self) -> None:
        self._counters.clear()

    def create(self, shape_type: str, id: Optional[str] = None,
               existing_ids: Iterable[str] = (), **options) -> Shape:
        shape_cls = self._lookup(shape_type)
        shape_id = id or self.generate_id(shape_type, existing_ids)
        return shape_cls(id=shape_id, **options)

    def from_json(self, data: dict, binding_registry: Optional[BindingRegistry] = None) -> Shape:
        if not isinstance(data, dict) or not data.get("type"):
            raise ShapeError("Invalid shape JSON: type is required")
        shape_cls = self._lookup(data["type"])
        return shape_cls.from_json(data, binding_registry or self.binding_registry)

    def _register_all(self) -> None:
        self.register("rectangle", Rectangle)
        self.register("polygon", Polygon)
        self.register("path", PathShape)
