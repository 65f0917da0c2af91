"""Shapes with bindable properties."""

from .base import Shape, ShapeError
from .primitives import PathShape, Polygon, Rectangle
from .registry import ShapeRegistry

__all__ = [
    "Shape", "ShapeError",
    "Rectangle", "Polygon", "PathShape",
    "ShapeRegistry",
]
