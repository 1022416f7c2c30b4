"""Data model for a finalized AOI polygon.

A Polygon is created by the drawing session when the user finishes a
shape, and handed to the collaborator that stores the polygon collection.
The core never mutates a polygon after it has been emitted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

Point = tuple[float, float]
"""A ``(lat, lng)`` pair in WGS 84 degrees."""


@dataclass(frozen=True, slots=True)
class Polygon:
    """A user-drawn Area of Interest.

    Attributes:
        id: Unique, monotonically increasing identifier (millisecond timestamp).
        name: Display name (e.g. ``"AOI 3"``).
        points: Vertices as ``(lat, lng)`` tuples in capture order.
    """

    id: int
    name: str
    points: tuple[Point, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        """Serialise to the ``{id, name, points}`` handoff shape."""
        return {
            "id": self.id,
            "name": self.name,
            "points": [list(p) for p in self.points],
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Polygon:
        """Deserialise from the ``{id, name, points}`` handoff shape.

        Raises:
            TypeError: If ``points`` is not a list of pairs.
        """
        points_raw = data.get("points", [])
        if not isinstance(points_raw, list):
            msg = f"points must be a list, got {type(points_raw).__name__}"
            raise TypeError(msg)
        points = tuple((float(p[0]), float(p[1])) for p in points_raw)  # type: ignore[index]

        return cls(
            id=int(data.get("id", 0)),  # type: ignore[arg-type]
            name=str(data.get("name", "")),
            points=points,
        )

    @property
    def vertex_count(self) -> int:
        """Number of vertices in the polygon."""
        return len(self.points)
