"""Viewport-driven render pipeline over the polygon collection."""

from aoi_mapper.pipeline.render import (
    RenderDecision,
    ViewportTracker,
    prepare_in_batches,
    prepare_polygon,
    select_visible,
)

__all__ = [
    "RenderDecision",
    "ViewportTracker",
    "prepare_in_batches",
    "prepare_polygon",
    "select_visible",
]
