"""Zoom-level simplification policy and memory estimate."""

from __future__ import annotations

from collections.abc import Iterable

from aoi_mapper.core.constants import (
    BUILDING_TOLERANCE,
    BYTES_PER_MIB,
    BYTES_PER_POINT,
    BYTES_PER_POLYGON,
    CITY_MAX_ZOOM,
    CITY_TOLERANCE,
    COUNTRY_MAX_ZOOM,
    COUNTRY_TOLERANCE,
    NEIGHBOURHOOD_MAX_ZOOM,
    NEIGHBOURHOOD_TOLERANCE,
)
from aoi_mapper.models.polygon import Polygon


def get_tolerance_for_zoom(zoom_level: float) -> float:
    """Pick a simplification tolerance (degrees) for a map zoom level.

    Zoom bands: up to 9 country, 10-13 city, 14-16 neighbourhood,
    17 and above building level (no simplification).
    """
    if zoom_level <= COUNTRY_MAX_ZOOM:
        return COUNTRY_TOLERANCE
    if zoom_level <= CITY_MAX_ZOOM:
        return CITY_TOLERANCE
    if zoom_level <= NEIGHBOURHOOD_MAX_ZOOM:
        return NEIGHBOURHOOD_TOLERANCE
    return BUILDING_TOLERANCE


def estimate_memory_usage(polygons: Iterable[Polygon]) -> float:
    """Rough memory footprint of a polygon collection in MiB.

    Counts 16 bytes per coordinate pair plus about 100 bytes of overhead
    per polygon; good enough to decide when to switch to batching.
    """
    total_points = 0
    polygon_count = 0
    for polygon in polygons:
        total_points += len(polygon.points)
        polygon_count += 1

    total_bytes = total_points * BYTES_PER_POINT + polygon_count * BYTES_PER_POLYGON
    return total_bytes / BYTES_PER_MIB
