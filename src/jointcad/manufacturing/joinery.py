"""Finger-joint and dovetail tooth synthesis along straight edges.

This is the single tooth generator shared by every renderer: the 2D
preview and the 3D assembly both draw exactly what ``synthesize`` returns.
The output is a pure function of the edge endpoints, the joinery record and
the owning shape's bounds.

Teeth are described in the edge-local frame: ``u`` is the unit direction
from the edge start to its end, ``n`` the outward unit normal.  Tooth ``i``
covers ``[i * width, (i + 1) * width]`` along ``u``; only every other slot is
emitted, starting at 0 for ``align="left"`` and at 1 for ``align="right"``.
The mating edge carries the complementary slots.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Union

from ..geometry import BoundingBox, Edge, Point

logger = logging.getLogger(__name__)

# Geometry constants.  Both renderers depend on these values; they are not
# user configuration.
MIN_EDGE_LENGTH = 0.001
MIN_DEPTH = 0.5
MAX_DEPTH_RATIO = 0.45
DOVETAIL_DEPTH_FACTOR = 1.6
DOVETAIL_MAX_DEPTH_RATIO = 0.6
TAPER_RATIO = 0.2
MIN_AUTO_TOOTH_WIDTH = 4.0


class JointType(Enum):
    FINGER_JOINT = "finger_joint"
    DOVETAIL = "dovetail"


# Names written by older versions of the editor
LEGACY_TYPE_NAMES = {
    "male": JointType.FINGER_JOINT,
    "finger_male": JointType.FINGER_JOINT,
}

ALIGN_VALUES = ("left", "right")


def normalize_joint_type(value: Any) -> Optional[JointType]:
    """Map a stored type name (any case, legacy names included) to a JointType."""
    if isinstance(value, JointType):
        return value
    name = str(value or "").strip().lower()
    if name in LEGACY_TYPE_NAMES:
        return LEGACY_TYPE_NAMES[name]
    try:
        return JointType(name)
    except ValueError:
        return None


@dataclass
class JoineryRecord:
    """Per-edge fabrication metadata, persisted under the edge key.

    Attributes:
        type: Joint kind name ("finger_joint", "dovetail", or a legacy name)
        thickness_mm: Material thickness; drives tooth depth
        finger_count: Requested number of tooth slots; anything below 2
            (or non-numeric) selects automatic sizing
        align: "left" emits even slots, "right" emits odd slots
    """
    type: str = JointType.FINGER_JOINT.value
    thickness_mm: Any = 3.0
    finger_count: Any = 6
    align: str = "left"

    @property
    def joint_type(self) -> Optional[JointType]:
        return normalize_joint_type(self.type)

    def flipped(self) -> "JoineryRecord":
        align = "left" if self.align == "right" else "right"
        return JoineryRecord(self.type, self.thickness_mm, self.finger_count, align)

    def to_json(self, key: Optional[str] = None) -> dict:
        data = {
            "type": self.type,
            "thicknessMm": self.thickness_mm,
            "fingerCount": self.finger_count,
            "align": self.align or "left",
        }
        if key is not None:
            data = {"key": key, **data}
        return data

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "JoineryRecord":
        return cls(
            type=data.get("type"),
            thickness_mm=data.get("thicknessMm"),
            finger_count=data.get("fingerCount"),
            align=data.get("align") or "left",
        )


@dataclass(frozen=True)
class Tooth:
    """One emitted tooth, in the edge-local frame.

    Attributes:
        index: Slot index along the edge
        start_distance: Distance from the edge start to the tooth base start
        width: Length of the tooth base along the edge
        depth: Protrusion along the outward normal
        outward_offset: ``n * depth`` as a vector
        taper: Flare of each outer corner along +/-u (0 for finger joints)
    """
    index: int
    start_distance: float
    width: float
    depth: float
    outward_offset: Point
    taper: float = 0.0

    @property
    def end_distance(self) -> float:
        return self.start_distance + self.width

    @property
    def taper_left(self) -> float:
        return self.taper

    @property
    def taper_right(self) -> float:
        return self.taper

    def to_json(self) -> dict:
        return {
            "index": self.index,
            "startDistance": self.start_distance,
            "width": self.width,
            "depth": self.depth,
            "outwardOffset": self.outward_offset.to_json(),
            "taper": self.taper,
        }


def _as_number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return math.nan
    return number


def outward_normal(edge: Edge, bounds: Optional[BoundingBox] = None) -> Point:
    """
    Unit normal pointing away from the shape interior.

    The interior is approximated by the bounds center, so for concave
    outlines an edge near the middle can get the inward normal.  Without
    bounds the left-hand normal ``(-u.y, u.x)`` is used.
    """
    d = edge.end - edge.start
    length = d.length()
    u = d * (1.0 / length)
    n = Point(-u.y, u.x)
    if bounds is not None and (edge.midpoint() - bounds.center).dot(n) < 0:
        n = -n
    return n


def tooth_depth(thickness_mm: Any, length: float, joint_type: JointType) -> float:
    thickness = _as_number(thickness_mm)
    if math.isnan(thickness):
        thickness = 0.0
    depth = min(max(thickness, MIN_DEPTH), length * MAX_DEPTH_RATIO)
    if joint_type is JointType.DOVETAIL:
        depth = min(depth * DOVETAIL_DEPTH_FACTOR, length * DOVETAIL_MAX_DEPTH_RATIO)
    return depth


def tooth_count(finger_count: Any, length: float, depth: float) -> int:
    requested = _as_number(finger_count)
    if math.isfinite(requested) and requested >= 2:
        # teeth narrower than MIN_EDGE_LENGTH are never generated
        limit = max(2, math.floor(length / MIN_EDGE_LENGTH))
        if requested > limit:
            logger.debug("fingerCount %s capped to %d for edge of length %g", finger_count, limit, length)
            return limit
        return math.floor(requested)
    return max(2, math.floor(length / max(2 * depth, MIN_AUTO_TOOTH_WIDTH)))


RecordLike = Union[JoineryRecord, Mapping[str, Any], None]


def _coerce_record(record: RecordLike) -> Optional[JoineryRecord]:
    if record is None or isinstance(record, JoineryRecord):
        return record
    if isinstance(record, Mapping):
        return JoineryRecord.from_json(record)
    return None


def synthesize(edge: Optional[Edge], record: RecordLike,
               bounds: Optional[BoundingBox] = None) -> List[Tooth]:
    """
    Compute the teeth for one jointed edge.

    Never raises: a missing edge or record, an unknown joint type and a
    degenerate edge all produce an empty list.
    """
    record = _coerce_record(record)
    if edge is None or record is None:
        return []

    joint_type = record.joint_type
    if joint_type is None:
        logger.debug("Edge %s: unknown joint type %r, no teeth", edge.key, record.type)
        return []

    length = edge.length()
    if not length >= MIN_EDGE_LENGTH:
        logger.debug("Edge %s: degenerate (length %g), no teeth", edge.key, length)
        return []

    n = outward_normal(edge, bounds)
    depth = tooth_depth(record.thickness_mm, length, joint_type)
    count = tooth_count(record.finger_count, length, depth)
    width = length / count
    taper = min(depth * TAPER_RATIO, width * TAPER_RATIO) if joint_type is JointType.DOVETAIL else 0.0
    first = 1 if record.align == "right" else 0

    return [
        Tooth(
            index=i,
            start_distance=i * width,
            width=width,
            depth=depth,
            outward_offset=n * depth,
            taper=taper,
        )
        for i in range(first, count, 2)
    ]


def tooth_outline(edge: Edge, tooth: Tooth) -> List[Point]:
    """
    World-space corners of a tooth: base start, base end, outer end, outer start.

    Dovetail outer corners are pushed apart by ``taper`` along the edge.
    """
    d = edge.end - edge.start
    u = d * (1.0 / d.length())
    base_start = edge.start + u * tooth.start_distance
    base_end = edge.start + u * tooth.end_distance
    return [
        base_start,
        base_end,
        base_end + tooth.outward_offset + u * tooth.taper,
        base_start + tooth.outward_offset - u * tooth.taper,
    ]
