"""Planar polygon geometry: simplification, bounds, culling, zoom policy."""

from aoi_mapper.geometry.bounds import calculate_bounds, is_polygon_visible
from aoi_mapper.geometry.simplify import simplify_polygon, squared_segment_distance
from aoi_mapper.geometry.tolerance import estimate_memory_usage, get_tolerance_for_zoom

__all__ = [
    "calculate_bounds",
    "estimate_memory_usage",
    "get_tolerance_for_zoom",
    "is_polygon_visible",
    "simplify_polygon",
    "squared_segment_distance",
]
