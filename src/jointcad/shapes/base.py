"""
Shape base class and the resolution template method.

A shape property is either *literal* (the number stored on the shape) or
*bound* (a ``Binding`` in ``shape.bindings``).  ``resolve`` produces a clone
whose bound properties hold concrete numbers; the original is never
modified.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, ClassVar, Dict, List, Optional, Tuple

from ..bindings.base import MissingResolver
from ..bindings.registry import default_registry
from ..bindings.resolver import BindingResolver
from ..geometry import BoundingBox, Edge, Path, edges_from_paths

if TYPE_CHECKING:
    from ..bindings.base import Binding
    from ..bindings.registry import BindingRegistry
    from ..parameters import ParameterStore


class ShapeError(Exception):
    """Unknown shape type or invalid binding assignment."""
    pass


def to_camel(name: str) -> str:
    """``center_x`` -> ``centerX`` (JSON property names)."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_snake(name: str) -> str:
    """``centerX`` -> ``center_x``."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass
class Shape:
    """
    Base class for editable shapes.

    Subclasses are dataclasses that declare ``type`` and ``bindable``
    (attribute names whose values may come from bindings) and implement
    ``paths``.
    """
    id: str = field(default="", kw_only=True)
    bindings: Dict[str, "Binding"] = field(default_factory=dict, kw_only=True)

    type: ClassVar[str] = "shape"
    bindable: ClassVar[Tuple[str, ...]] = ()

    def get_bindable_properties(self) -> List[str]:
        return list(self.bindable)

    # -- bindings ---------------------------------------------------------

    def set_binding(self, prop: str, binding: "Binding") -> None:
        if prop not in self.bindable:
            raise ShapeError(f"Property {prop} is not bindable for {self.type}")
        self.bindings[prop] = binding

    def get_binding(self, prop: str) -> Optional["Binding"]:
        return self.bindings.get(prop)

    def clear_binding(self, prop: str) -> None:
        self.bindings.pop(prop, None)

    def is_bound(self, prop: str) -> bool:
        return prop in self.bindings

    # -- resolution -------------------------------------------------------

    def clone(self) -> "Shape":
        return copy.deepcopy(self)

    def resolve(self, parameter_store: Optional["ParameterStore"] = None,
                resolver: Optional["BindingResolver"] = None) -> "Shape":
        """
        Return a concrete clone of this shape.

        Every bound property of the clone is overwritten with its resolved
        value; literal properties are copied unchanged.  When no resolver is
        given one is built around ``parameter_store``; a bound shape with
        neither raises ``MissingResolver``.
        """
        if resolver is None and self.bindings:
            if parameter_store is None:
                raise MissingResolver(
                    f"{self.type} {self.id or '<unsaved>'} has bindings but no parameter store or resolver"
                )
            resolver = BindingResolver(parameter_store)

        resolved = self.clone()
        for prop in self.get_bindable_properties():
            binding = self.bindings.get(prop)
            if binding is not None:
                setattr(resolved, prop, resolver.resolve_value(binding))
            else:
                setattr(resolved, prop, getattr(self, prop))
        return resolved

    # -- geometry ---------------------------------------------------------

    def paths(self) -> List[Path]:
        raise NotImplementedError(f"{type(self).__name__} must implement paths()")

    def get_bounds(self) -> BoundingBox:
        return BoundingBox.from_points(p for path in self.paths() for p in path.points)

    def edges(self) -> List[Edge]:
        """Outline edges stamped with this shape's id."""
        return edges_from_paths(self.paths(), self.id or None)

    # -- serialization ----------------------------------------------------

    def _extra_json(self) -> dict:
        """Non-bindable properties; overridden by shapes that have any."""
        return {}

    def to_json(self) -> dict:
        data = {
            "id": self.id,
            "type": self.type,
            "bindings": {to_camel(prop): b.to_json() for prop, b in self.bindings.items()},
        }
        for prop in self.bindable:
            if prop not in self.bindings:
                data[to_camel(prop)] = getattr(self, prop)
        data.update(self._extra_json())
        return data

    @classmethod
    def _options_from_json(cls, data: dict) -> dict:
        """Constructor keyword arguments read from a shape JSON object."""
        names = {f.name for f in fields(cls) if f.init and f.name not in ("id", "bindings")}
        options = {}
        for key, value in data.items():
            attr = to_snake(key)
            if attr in names and value is not None:
                options[attr] = value
        return options

    @classmethod
    def from_json(cls, data: dict, binding_registry: Optional["BindingRegistry"] = None) -> "Shape":
        if binding_registry is None:
            binding_registry = default_registry
        shape = cls(id=data.get("id", ""), **cls._options_from_json(data))
        for key, binding_data in (data.get("bindings") or {}).items():
            shape.set_binding(to_snake(key), binding_registry.create_from_json(binding_data))
        return shape
