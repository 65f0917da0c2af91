"""Persistent edge-key -> joinery record map."""

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from ..config import JoineryDefaults
from ..geometry import Edge, edge_key, legacy_edge_key
from .joinery import JoineryRecord

logger = logging.getLogger(__name__)

JoineryListener = Callable[[str, Optional[JoineryRecord]], None]


def _key_shape_id(key: str) -> Optional[str]:
    """Shape id of a canonical ``shape:path:index`` key; None for legacy keys."""
    parts = key.rsplit(":", 2)
    if len(parts) != 3 or not parts[0]:
        return None
    return parts[0]


class JoineryStore:
    """
    Joinery records keyed by edge identity.

    Lookups try the canonical ``shape:path:index`` key first and fall back to
    the legacy ``path:index`` key for edges that carry a shape id.  Listeners
    receive ``(key, record)`` on every change; ``record`` is None on removal.
    """

    def __init__(self, defaults: Optional[JoineryDefaults] = None):
        self.defaults = defaults or JoineryDefaults()
        self._records: Dict[str, JoineryRecord] = {}
        self._listeners: List[JoineryListener] = []

    def _notify(self, key: str, record: Optional[JoineryRecord]) -> None:
        for listener in list(self._listeners):
            listener(key, record)

    def subscribe(self, listener: JoineryListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return _unsubscribe

    def set(self, edge: Edge, record: JoineryRecord) -> Optional[JoineryRecord]:
        """Store a copy of ``record`` under the edge's canonical key."""
        if edge is None or record is None:
            return None
        stored = replace(record, align=record.align or "left")
        key = edge_key(edge)
        self._records[key] = stored
        self._notify(key, stored)
        return stored

    def assign(self, edge: Edge, joint_type: Optional[str] = None, **overrides) -> JoineryRecord:
        """Attach a joint using the configured defaults for anything not given."""
        record = JoineryRecord(
            type=joint_type or self.defaults.type,
            thickness_mm=overrides.pop("thickness_mm", self.defaults.thickness_mm),
            finger_count=overrides.pop("finger_count", self.defaults.finger_count),
            align=overrides.pop("align", self.defaults.align),
        )
        if overrides:
            raise TypeError(f"unexpected joinery settings: {', '.join(sorted(overrides))}")
        return self.set(edge, record)

    def get(self, edge: Edge) -> Optional[JoineryRecord]:
        if edge is None:
            return None
        record = self._records.get(edge_key(edge))
        if record is None and edge.shape_id:
            record = self._records.get(legacy_edge_key(edge))
        return record

    def get_by_key(self, key: str) -> Optional[JoineryRecord]:
        return self._records.get(key)

    def remove(self, edge: Edge) -> bool:
        """Remove the record for ``edge`` (canonical or legacy key)."""
        for key in (edge_key(edge), legacy_edge_key(edge)):
            if key in self._records:
                del self._records[key]
                self._notify(key, None)
                return True
        return False

    def flip_align(self, edge: Edge) -> Optional[JoineryRecord]:
        """Toggle left <-> right, so the other part of a pair owns the first tooth."""
        record = self.get(edge)
        if record is None:
            return None
        return self.set(edge, record.flipped())

    def remove_shape(self, shape_id: str) -> int:
        """Delete every record belonging to ``shape_id``; returns the count removed."""
        doomed = [key for key in self._records if _key_shape_id(key) == shape_id]
        for key in doomed:
            del self._records[key]
            self._notify(key, None)
        if doomed:
            logger.debug("Removed %d joinery record(s) of shape %s", len(doomed), shape_id)
        return len(doomed)

    def clear(self) -> None:
        self._records.clear()

    def items(self) -> Iterator[Tuple[str, JoineryRecord]]:
        return iter(list(self._records.items()))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: str) -> bool:
        return key in self._records

    def to_json(self) -> List[dict]:
        return [record.to_json(key) for key, record in self._records.items()]

    def load_json(self, entries: Iterable[dict]) -> None:
        """Replace the contents from a flattened entry list.

        Entries without ``key`` or ``type`` are skipped.
        """
        self._records.clear()
        for entry in entries or []:
            if not isinstance(entry, dict) or not entry.get("key") or not entry.get("type"):
                logger.debug("Skipping joinery entry without key/type: %r", entry)
                continue
            self._records[entry["key"]] = JoineryRecord.from_json(entry)

    @classmethod
    def from_json(cls, entries: Iterable[dict],
                  defaults: Optional[JoineryDefaults] = None) -> "JoineryStore":
        store = cls(defaults)
        store.load_json(entries)
        return store
