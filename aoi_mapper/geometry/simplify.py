"""Douglas-Peucker polygon simplification.

Reduces the vertex count of a polygon outline while keeping its shape
within a tolerance, so dense user-drawn or imported shapes stay cheap to
redraw at low zoom levels.

All distances are squared planar lat/lng deltas (no square roots, no
projection): the tolerance is in degrees and is compared as
``tolerance ** 2``.

The divide-and-conquer is driven by an explicit stack of index ranges
instead of Python recursion, so inputs with tens of thousands of points
cannot hit the interpreter's recursion limit.  Kept vertices are marked
and emitted in index order, which is exactly the order the recursive
formulation produces.
"""

from __future__ import annotations

from collections.abc import Sequence

from aoi_mapper.core.constants import DEFAULT_TOLERANCE
from aoi_mapper.models.polygon import Point

# Fewer points than this have no interior vertex to remove.
MIN_SIMPLIFIABLE_POINTS = 3


def squared_segment_distance(point: Point, start: Point, end: Point) -> float:
    """Squared distance from ``point`` to the segment ``start``-``end``.

    The projection parameter is clamped to ``[0, 1]``, so a point beyond
    either end is measured against that endpoint.  A zero-length segment
    measures the distance to ``start``.
    """
    x, y = point[0], point[1]
    x1, y1 = start[0], start[1]
    dx = end[0] - x1
    dy = end[1] - y1

    if dx != 0 or dy != 0:
        t = ((x - x1) * dx + (y - y1) * dy) / (dx * dx + dy * dy)
        if t > 1:
            x1, y1 = end[0], end[1]
        elif t > 0:
            x1 += dx * t
            y1 += dy * t

    dx = x - x1
    dy = y - y1
    return dx * dx + dy * dy


def simplify_polygon(
    points: Sequence[Point],
    tolerance: float = DEFAULT_TOLERANCE,
) -> list[Point]:
    """Simplify a point sequence with the Douglas-Peucker algorithm.

    Args:
        points: ``(lat, lng)`` vertices in drawing order.
        tolerance: Maximum perpendicular deviation in degrees (``>= 0``).
            Higher values simplify more aggressively.  With ``0`` only
            exactly colinear interior points are dropped.

    Returns:
        A new list holding a subsequence of ``points``.  The first and
        last input points are always kept.  Inputs with fewer than three
        points are returned unchanged.
    """
    if len(points) < MIN_SIMPLIFIABLE_POINTS:
        return list(points)

    sq_tolerance = tolerance * tolerance
    last = len(points) - 1

    keep = [False] * len(points)
    keep[0] = True
    keep[last] = True

    ranges: list[tuple[int, int]] = [(0, last)]
    while ranges:
        first, end = ranges.pop()

        max_sq_dist = sq_tolerance
        index = 0
        for i in range(first + 1, end):
            sq_dist = squared_segment_distance(points[i], points[first], points[end])
            # Strict comparison: on ties the leftmost candidate wins.
            if sq_dist > max_sq_dist:
                index = i
                max_sq_dist = sq_dist

        if max_sq_dist > sq_tolerance:
            keep[index] = True
            if index - first > 1:
                ranges.append((first, index))
            if end - index > 1:
                ranges.append((index, end))

    return [point for point, kept in zip(points, keep) if kept]
