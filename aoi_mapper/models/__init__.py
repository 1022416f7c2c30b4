"""Data models and schemas.

Defines the data structures exchanged with the map tool's collaborators:
- Polygon: A finalized, user-drawn AOI
- BoundingBox: Polygon extent or current viewport
- PolygonCollection: The in-memory list of drawn polygons
- PolygonRecord / PolygonCollectionRecord: Persisted JSON shape
"""

from aoi_mapper.models.bounds import BoundingBox
from aoi_mapper.models.collection import PolygonCollection
from aoi_mapper.models.polygon import Point, Polygon
from aoi_mapper.models.records import (
    PolygonCollectionRecord,
    PolygonRecord,
    RecordValidationError,
)

__all__ = [
    "BoundingBox",
    "Point",
    "Polygon",
    "PolygonCollection",
    "PolygonCollectionRecord",
    "PolygonRecord",
    "RecordValidationError",
]
