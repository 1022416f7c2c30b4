"""Axis-aligned bounding box in latitude/longitude degrees.

Used both for polygon extents and for the caller's current viewport.
Boxes are derived values: the core recomputes them on demand and never
caches them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """A ``{minLat, maxLat, minLng, maxLng}`` box.

    An all-zero box is what an empty point list produces; it is a real
    (degenerate) box at the origin, not a missing value.
    """

    min_lat: float = 0.0
    max_lat: float = 0.0
    min_lng: float = 0.0
    max_lng: float = 0.0

    def to_dict(self) -> dict[str, float]:
        """Serialise to the camelCase shape the map widget exchanges."""
        return {
            "minLat": self.min_lat,
            "maxLat": self.max_lat,
            "minLng": self.min_lng,
            "maxLng": self.max_lng,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> BoundingBox:
        """Deserialise from the camelCase viewport shape.

        Raises:
            KeyError: If one of the four edges is missing.
        """
        return cls(
            min_lat=float(data["minLat"]),  # type: ignore[arg-type]
            max_lat=float(data["maxLat"]),  # type: ignore[arg-type]
            min_lng=float(data["minLng"]),  # type: ignore[arg-type]
            max_lng=float(data["maxLng"]),  # type: ignore[arg-type]
        )
