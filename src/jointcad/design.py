"""
Design document: parameters, shapes and edge joinery in one place.

``Design.joinery_layout`` is the tooth source for every renderer.  It works on
resolved geometry, so teeth follow the parameters that drive the shapes.

File format (JSON)::

    {
      "parameters": [{"id": ..., "name": ..., "value": ...}, ...],
      "shapes": [{"id": ..., "type": ..., "bindings": {...}, ...}, ...],
      "edgeJoinery": [{"key": "rect-1:0:2", "type": "finger_joint", ...}, ...]
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .bindings import BindingRegistry, BindingResolver, default_registry
from .config import JointcadConfig
from .expr import DiagnosticCollector, ExpressionEngine
from .geometry import Edge, Point
from .manufacturing import JoineryRecord, JoineryStore, Tooth, synthesize, tooth_outline
from .parameters import ParameterStore
from .shapes import Shape, ShapeError, ShapeRegistry

logger = logging.getLogger(__name__)


@dataclass
class JointedEdge:
    """An edge with joinery, its synthesized teeth and their world-space outlines."""
    edge: Edge
    record: JoineryRecord
    teeth: List[Tooth] = field(default_factory=list)
    outlines: List[List[Point]] = field(default_factory=list)

    @property
    def key(self) -> str:
        return self.edge.key


class Design:
    def __init__(self, parameters: Optional[ParameterStore] = None,
                 joinery: Optional[JoineryStore] = None,
                 config: Optional[JointcadConfig] = None,
                 engine: Optional[ExpressionEngine] = None,
                 shape_registry: Optional[ShapeRegistry] = None,
                 binding_registry: Optional[BindingRegistry] = None):
        self.config = config or JointcadConfig()
        self.parameters = parameters or ParameterStore()
        self.joinery = joinery or JoineryStore(self.config.joinery)
        self.engine = engine or ExpressionEngine()
        self.binding_registry = binding_registry or default_registry
        self.shape_registry = shape_registry or ShapeRegistry(self.binding_registry)
        self._shapes: Dict[str, Shape] = {}

    # -- shapes -----------------------------------------------------------

    @property
    def shapes(self) -> List[Shape]:
        return list(self._shapes.values())

    def add_shape(self, shape: Shape) -> Shape:
        if not shape.id:
            shape.id = self.shape_registry.generate_id(shape.type, self._shapes)
        if shape.id in self._shapes:
            raise ShapeError(f"Shape with id {shape.id} already exists")
        self._shapes[shape.id] = shape
        return shape

    def create_shape(self, shape_type: str, **options) -> Shape:
        shape = self.shape_registry.create(shape_type, existing_ids=self._shapes, **options)
        return self.add_shape(shape)

    def get_shape(self, shape_id: str) -> Optional[Shape]:
        return self._shapes.get(shape_id)

    def remove_shape(self, shape_id: str) -> Optional[Shape]:
        """Remove a shape and every joinery record attached to its edges."""
        shape = self._shapes.pop(shape_id, None)
        if shape is not None:
            self.joinery.remove_shape(shape_id)
        return shape

    # -- resolution -------------------------------------------------------

    def resolver(self, diagnostics: Optional[DiagnosticCollector] = None) -> BindingResolver:
        return BindingResolver(self.parameters, self.engine, diagnostics)

    def get_resolved(self, shape_id: str,
                     diagnostics: Optional[DiagnosticCollector] = None) -> Optional[Shape]:
        shape = self._shapes.get(shape_id)
        if shape is None:
            return None
        return self.resolver(diagnostics).resolve_shape(shape)

    def resolved_shapes(self, diagnostics: Optional[DiagnosticCollector] = None) -> List[Shape]:
        return self.resolver(diagnostics).resolve_all(self.shapes)

    def edges(self, shape_id: str, diagnostics: Optional[DiagnosticCollector] = None) -> List[Edge]:
        """Edges of the resolved outline of ``shape_id``."""
        resolved = self.get_resolved(shape_id, diagnostics)
        return resolved.edges() if resolved is not None else []

    def find_edge(self, shape_id: str, path_index: int, index: int) -> Optional[Edge]:
        for edge in self.edges(shape_id):
            if edge.path_index == path_index and edge.index == index:
                return edge
        return None

    # -- joinery ----------------------------------------------------------

    def joinery_layout(self, diagnostics: Optional[DiagnosticCollector] = None,
                       shape_id: Optional[str] = None) -> List[JointedEdge]:
        """Teeth for every jointed edge, in shape order then edge order."""
        resolver = self.resolver(diagnostics)
        layout = []
        for shape in self.shapes:
            if shape_id is not None and shape.id != shape_id:
                continue
            resolved = resolver.resolve_shape(shape)
            bounds = resolved.get_bounds()
            for edge in resolved.edges():
                record = self.joinery.get(edge)
                if record is None:
                    continue
                teeth = synthesize(edge, record, bounds)
                layout.append(JointedEdge(
                    edge=edge,
                    record=record,
                    teeth=teeth,
                    outlines=[tooth_outline(edge, tooth) for tooth in teeth],
                ))
        return layout

    # -- persistence ------------------------------------------------------

    def to_json(self) -> dict:
        return {
            "parameters": self.parameters.to_json()["parameters"],
            "shapes": [shape.to_json() for shape in self.shapes],
            "edgeJoinery": self.joinery.to_json(),
        }

    @classmethod
    def from_json(cls, data: dict, config: Optional[JointcadConfig] = None,
                  shape_registry: Optional[ShapeRegistry] = None,
                  binding_registry: Optional[BindingRegistry] = None) -> "Design":
        if not isinstance(data, dict) or not isinstance(data.get("shapes", []), list):
            raise ShapeError("Invalid design JSON: expected an object with a 'shapes' list")
        design = cls(
            parameters=ParameterStore.from_json({"parameters": data.get("parameters") or []}),
            config=config,
            shape_registry=shape_registry,
            binding_registry=binding_registry,
        )
        for shape_data in data.get("shapes") or []:
            design.add_shape(design.shape_registry.from_json(shape_data, design.binding_registry))
        design.joinery.load_json(data.get("edgeJoinery") or [])
        logger.debug("Loaded design: %d parameter(s), %d shape(s), %d joint(s)",
                     len(design.parameters), len(design._shapes), len(design.joinery))
        return design

    def save(self, path: Path | str) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8") as fp:
            json.dump(self.to_json(), fp, indent=2)

    @classmethod
    def load(cls, path: Path | str, config: Optional[JointcadConfig] = None) -> "Design":
        with Path(path).open("r", encoding="utf-8") as fp:
            data = json.load(fp)
        return cls.from_json(data, config=config)
