"""Pydantic models for the persisted polygon collection.

The storage collaborator keeps the polygon collection as a JSON array of
``{id, name, points}`` objects under ``STORAGE_KEY``.  These models are
the validation boundary for that document: coordinates coming back from
storage must be finite with latitudes inside [-90, 90], and each polygon
must still have at least three vertices.  Longitudes are not range
checked: clicks on a wrapped world copy give values past ±180 that are
stored as drawn.  Everything inside the core (simplification, bounds,
culling) trusts its input and does no validation of its own.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field, RootModel, field_validator
from pydantic import ValidationError as PydanticValidationError

from aoi_mapper.core.constants import MIN_POLYGON_POINTS
from aoi_mapper.core.exceptions import ValidationError
from aoi_mapper.models.polygon import Polygon


class RecordValidationError(ValueError, ValidationError):
    """Raised when a persisted polygon document fails validation.

    Attributes:
        errors: Per-field error descriptions from the record models.
    """

    default_stage = "records"
    default_code = "RECORD_VALIDATION_FAILED"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        ValidationError.__init__(self, message)


def _record_error(message: str, exc: PydanticValidationError) -> RecordValidationError:
    errors = [f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return RecordValidationError(f"{message} ({exc.error_count()} error(s))", errors)


class PolygonRecord(BaseModel):
    """One stored polygon.

    Attributes:
        id: Polygon identifier.
        name: Display name.
        points: ``[lat, lng]`` pairs in capture order.
    """

    id: int
    name: str
    points: list[list[float]] = Field(default_factory=list)

    @field_validator("points")
    @classmethod
    def _check_points(cls, points: list[list[float]]) -> list[list[float]]:
        if len(points) < MIN_POLYGON_POINTS:
            msg = f"need at least {MIN_POLYGON_POINTS} points, got {len(points)}"
            raise ValueError(msg)
        for index, pair in enumerate(points):
            if len(pair) != 2:
                msg = f"point {index} must be a [lat, lng] pair, got {len(pair)} values"
                raise ValueError(msg)
            lat, lng = pair
            if not (math.isfinite(lat) and math.isfinite(lng)):
                msg = f"point {index} is not finite: [{lat}, {lng}]"
                raise ValueError(msg)
            if not -90.0 <= lat <= 90.0:
                msg = f"point {index} latitude {lat} outside [-90, 90]"
                raise ValueError(msg)
        return points

    @classmethod
    def from_polygon(cls, polygon: Polygon) -> PolygonRecord:
        """Build a record from a finalized polygon.

        Raises:
            RecordValidationError: If the polygon cannot be stored (e.g. a
                non-finite coordinate).
        """
        try:
            return cls(
                id=polygon.id,
                name=polygon.name,
                points=[list(p) for p in polygon.points],
            )
        except PydanticValidationError as exc:
            msg = f"Polygon {polygon.id} ({polygon.name}) cannot be stored"
            raise _record_error(msg, exc) from exc

    def to_polygon(self) -> Polygon:
        """Convert back to the core's immutable polygon type."""
        return Polygon(
            id=self.id,
            name=self.name,
            points=tuple((p[0], p[1]) for p in self.points),
        )


class PolygonCollectionRecord(RootModel[list[PolygonRecord]]):
    """The stored polygon collection: a bare JSON array of records."""

    root: list[PolygonRecord] = Field(default_factory=list)

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise to the JSON array the storage collaborator writes."""
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, payload: str | bytes) -> PolygonCollectionRecord:
        """Parse and validate a stored collection document.

        Raises:
            RecordValidationError: If the document is not valid JSON or a
                polygon fails validation.
        """
        try:
            return cls.model_validate_json(payload)
        except PydanticValidationError as exc:
            msg = "Stored polygon collection rejected"
            raise _record_error(msg, exc) from exc

    @classmethod
    def from_polygons(cls, polygons: list[Polygon]) -> PolygonCollectionRecord:
        """Build a collection record from finalized polygons.

        Raises:
            RecordValidationError: If any polygon cannot be stored.
        """
        return cls([PolygonRecord.from_polygon(p) for p in polygons])

    def to_polygons(self) -> list[Polygon]:
        """Convert every record back to a polygon, preserving order."""
        return [record.to_polygon() for record in self.root]
