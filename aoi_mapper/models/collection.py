"""In-memory polygon collection held by the map tool.

Mirrors what the UI keeps in state: an ordered list of finalized
polygons that grows as shapes are drawn and shrinks when the user deletes
one.  Its length seeds the drawing session's naming counter, and it
converts to and from the persisted record shape.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from aoi_mapper.models.polygon import Polygon
from aoi_mapper.models.records import PolygonCollectionRecord

logger = logging.getLogger("aoi_mapper.models.collection")


class PolygonCollection:
    """Ordered collection of finalized polygons keyed by ``id``."""

    def __init__(self, polygons: Iterable[Polygon] = ()) -> None:
        self._polygons: list[Polygon] = list(polygons)

    def __len__(self) -> int:
        return len(self._polygons)

    def __iter__(self) -> Iterator[Polygon]:
        return iter(list(self._polygons))

    def add(self, polygon: Polygon) -> None:
        """Append a polygon.  Usable directly as a session's ``on_complete``."""
        self._polygons.append(polygon)
        logger.debug("Polygon stored | id=%d | name=%s | total=%d", polygon.id, polygon.name, len(self))

    def get(self, polygon_id: int) -> Polygon | None:
        """Return the polygon with ``polygon_id``, or ``None``."""
        for polygon in self._polygons:
            if polygon.id == polygon_id:
                return polygon
        return None

    def remove(self, polygon_id: int) -> bool:
        """Delete the polygon with ``polygon_id``.  Returns whether one was removed."""
        before = len(self._polygons)
        self._polygons = [p for p in self._polygons if p.id != polygon_id]
        removed = len(self._polygons) < before
        if removed:
            logger.debug("Polygon removed | id=%d | total=%d", polygon_id, len(self))
        return removed

    @property
    def polygons(self) -> list[Polygon]:
        """Snapshot of the stored polygons in insertion order."""
        return list(self._polygons)

    def to_record(self) -> PolygonCollectionRecord:
        """Build the persisted record for the storage collaborator.

        Raises:
            RecordValidationError: If a polygon cannot be stored.
        """
        return PolygonCollectionRecord.from_polygons(self._polygons)

    @classmethod
    def from_record(cls, record: PolygonCollectionRecord) -> PolygonCollection:
        """Rebuild a collection from a validated persisted record."""
        return cls(record.to_polygons())
