"""Fabrication metadata and tooth synthesis for jointed edges."""

from .joinery import (
    JointType,
    JoineryRecord,
    Tooth,
    normalize_joint_type,
    outward_normal,
    synthesize,
    tooth_count,
    tooth_depth,
    tooth_outline,
)
from .store import JoineryStore

__all__ = [
    "JointType", "JoineryRecord", "Tooth",
    "normalize_joint_type", "outward_normal", "tooth_depth", "tooth_count",
    "synthesize", "tooth_outline",
    "JoineryStore",
]
