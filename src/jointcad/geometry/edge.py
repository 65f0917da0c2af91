"""
Edges: straight outline segments with a stable identity key.

Edges are never persisted; they are recomputed from resolved geometry.  The
key is what joinery records are stored under, so its format must not change:

    canonical  "{shape_id}:{path_index}:{index}"
    legacy     "{path_index}:{index}"   (files saved before shape ids)
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .primitives import Anchor, Path, Point


@dataclass(frozen=True)
class Edge:
    anchor1: Anchor
    anchor2: Anchor
    shape_id: Optional[str] = None
    path_index: int = 0
    index: int = 0
    closed: bool = False

    @property
    def start(self) -> Point:
        return self.anchor1.position

    @property
    def end(self) -> Point:
        return self.anchor2.position

    def length(self) -> float:
        return self.start.distance(self.end)

    def midpoint(self) -> Point:
        return (self.start + self.end) * 0.5

    @property
    def key(self) -> str:
        return edge_key(self)

    def with_shape(self, shape_id: Optional[str]) -> "Edge":
        return Edge(self.anchor1, self.anchor2, shape_id, self.path_index, self.index, self.closed)


def edge_key(edge: Edge) -> str:
    if edge.shape_id:
        return f"{edge.shape_id}:{edge.path_index}:{edge.index}"
    return legacy_edge_key(edge)


def legacy_edge_key(edge: Edge) -> str:
    return f"{edge.path_index}:{edge.index}"


def edges_from_path(path: Path, path_index: int = 0, shape_id: Optional[str] = None) -> List[Edge]:
    """
    Split a path into edges.

    Segment ``i`` runs from anchor ``i`` to ``i+1``.  A closed path also
    yields the closing edge from the last anchor back to the first, with
    index ``len(anchors) - 1``.
    """
    anchors = path.anchors
    if len(anchors) < 2:
        return []
    edges = [
        Edge(anchors[i], anchors[i + 1], shape_id, path_index, i, path.closed)
        for i in range(len(anchors) - 1)
    ]
    if path.closed:
        edges.append(Edge(anchors[-1], anchors[0], shape_id, path_index, len(anchors) - 1, True))
    return edges


def edges_from_paths(paths: Iterable[Path], shape_id: Optional[str] = None) -> List[Edge]:
    edges: List[Edge] = []
    for path_index, path in enumerate(paths):
        edges.extend(edges_from_path(path, path_index, shape_id))
    return edges
