"""Concrete shapes: enough outline geometry to drive edge extraction."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar, List, Tuple

from ..geometry import Path, Point
from .base import Shape


@dataclass
class Rectangle(Shape):
    """Axis-aligned rectangle with corner (x, y)."""
    x: float = 0.0
    y: float = 0.0
    width: float = 40.0
    height: float = 40.0

    type: ClassVar[str] = "rectangle"
    bindable: ClassVar[Tuple[str, ...]] = ("x", "y", "width", "height")

    def paths(self) -> List[Path]:
        x, y, w, h = self.x, self.y, self.width, self.height
        corners = [Point(x, y), Point(x + w, y), Point(x + w, y + h), Point(x, y + h)]
        return [Path.from_points(corners, closed=True)]


@dataclass
class Polygon(Shape):
    """Regular polygon; the first vertex points straight up (-90 degrees)."""
    center_x: float = 0.0
    center_y: float = 0.0
    radius: float = 20.0
    sides: int = 5

    type: ClassVar[str] = "polygon"
    bindable: ClassVar[Tuple[str, ...]] = ("center_x", "center_y", "radius", "sides")

    def __post_init__(self):
        self.sides = max(3, math.floor(self.sides))

    def vertices(self) -> List[Point]:
        # sides may hold a non-integer after binding resolution
        sides = max(3, math.floor(self.sides))
        step = 2 * math.pi / sides
        start = -math.pi / 2
        return [
            Point(self.center_x + self.radius * math.cos(start + i * step),
                  self.center_y + self.radius * math.sin(start + i * step))
            for i in range(sides)
        ]

    def paths(self) -> List[Path]:
        return [Path.from_points(self.vertices(), closed=True)]


@dataclass
class PathShape(Shape):
    """Free polyline drawn by the user, translated by a bindable offset."""
    points: List[Point] = field(default_factory=list)
    closed: bool = False
    offset_x: float = 0.0
    offset_y: float = 0.0

    type: ClassVar[str] = "path"
    bindable: ClassVar[Tuple[str, ...]] = ("offset_x", "offset_y")

    def __post_init__(self):
        self.points = [p if isinstance(p, Point) else Point.from_json(p) for p in self.points]

    def paths(self) -> List[Path]:
        offset = Point(self.offset_x, self.offset_y)
        return [Path.from_points([p + offset for p in self.points], closed=self.closed)]

    def _extra_json(self) -> dict:
        return {"points": [p.to_json() for p in self.points], "closed": self.closed}
