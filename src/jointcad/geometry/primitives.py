"""Planar geometry primitives: points, anchors, paths and bounding boxes."""

import math
from dataclasses import dataclass, field
from typing import Iterable, List


@dataclass(frozen=True)
class Point:
    """A 2D point / vector."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> "Point":
        return Point(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: "Point") -> float:
        return (other - self).length()

    def to_json(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_json(cls, data) -> "Point":
        if isinstance(data, dict):
            return cls(float(data["x"]), float(data["y"]))
        return cls(float(data[0]), float(data[1]))


@dataclass(frozen=True)
class Anchor:
    """A path vertex.  Only straight segments are modelled."""
    position: Point


@dataclass
class Path:
    """Ordered anchors, optionally closed back to the first anchor."""
    anchors: List[Anchor] = field(default_factory=list)
    closed: bool = False

    @classmethod
    def from_points(cls, points: Iterable[Point], closed: bool = False) -> "Path":
        return cls([Anchor(p) for p in points], closed)

    @property
    def points(self) -> List[Point]:
        return [a.position for a in self.anchors]


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box given by its minimum corner and size."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2.0, self.y + self.height / 2.0)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "BoundingBox":
        pts = list(points)
        if not pts:
            return cls(0.0, 0.0, 0.0, 0.0)
        xs = [p.x for p in pts]
        ys = [p.y for p in pts]
        return cls(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def to_json(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}
