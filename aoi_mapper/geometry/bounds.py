"""Bounding boxes and viewport culling.

``calculate_bounds`` gives a polygon's extent in one pass;
``is_polygon_visible`` compares it with the caller's viewport so polygons
entirely off-screen can be skipped before any drawing work is done.  The
overlap test is a conservative over-approximation (box overlap does not
imply polygon overlap) meant only for cheap culling.
"""

from __future__ import annotations

from collections.abc import Sequence

from aoi_mapper.models.bounds import BoundingBox
from aoi_mapper.models.polygon import Point


def calculate_bounds(points: Sequence[Point]) -> BoundingBox:
    """Compute the axis-aligned bounding box of ``points``.

    Returns:
        The box spanning every point.  An empty sequence gives the
        degenerate ``BoundingBox(0, 0, 0, 0)``, which callers must not
        read as "no polygon".
    """
    if not points:
        return BoundingBox()

    min_lat = max_lat = points[0][0]
    min_lng = max_lng = points[0][1]

    for point in points:
        lat, lng = point[0], point[1]
        if lat < min_lat:
            min_lat = lat
        if lat > max_lat:
            max_lat = lat
        if lng < min_lng:
            min_lng = lng
        if lng > max_lng:
            max_lng = lng

    return BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lng=min_lng, max_lng=max_lng)


def is_polygon_visible(polygon_bounds: BoundingBox, viewport_bounds: BoundingBox) -> bool:
    """Return whether a polygon's box overlaps the viewport.

    Boxes only count as disjoint when one lies strictly outside the other
    along an axis; touching edges are visible.
    """
    return not (
        polygon_bounds.max_lat < viewport_bounds.min_lat
        or polygon_bounds.min_lat > viewport_bounds.max_lat
        or polygon_bounds.max_lng < viewport_bounds.min_lng
        or polygon_bounds.min_lng > viewport_bounds.max_lng
    )
