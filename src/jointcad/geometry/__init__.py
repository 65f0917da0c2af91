"""Planar geometry used for edge extraction and joinery."""

from .primitives import Anchor, BoundingBox, Path, Point
from .edge import Edge, edge_key, edges_from_path, edges_from_paths, legacy_edge_key

__all__ = [
    "Point", "Anchor", "Path", "BoundingBox",
    "Edge", "edge_key", "legacy_edge_key", "edges_from_path", "edges_from_paths",
]
