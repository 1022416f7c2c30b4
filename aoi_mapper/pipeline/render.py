"""Render pipeline: which polygons to draw for the current view, and how.

For each polygon: simplify with the tolerance for the current zoom,
compute the bounds of the simplified outline, and cull it against the
viewport.  ``select_visible`` does this in one synchronous pass for small
collections; ``prepare_in_batches`` runs the same steps through a
``BatchScheduler`` so large collections never block the event loop.

``ViewportTracker`` is the entry point for map events: it debounces map
motion and throttles pointer movement before the pipeline re-runs.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Self

from aoi_mapper.core.capabilities import IdleScheduler
from aoi_mapper.core.config import MapperConfig
from aoi_mapper.core.constants import DEFAULT_CHUNK_SIZE
from aoi_mapper.geometry.bounds import calculate_bounds, is_polygon_visible
from aoi_mapper.geometry.simplify import simplify_polygon
from aoi_mapper.geometry.tolerance import get_tolerance_for_zoom
from aoi_mapper.models.bounds import BoundingBox
from aoi_mapper.models.polygon import Point, Polygon
from aoi_mapper.monitoring.performance import PerformanceMonitor
from aoi_mapper.scheduling.batch import BatchScheduler
from aoi_mapper.scheduling.rate_limit import Debouncer, Throttler

logger = logging.getLogger("aoi_mapper.pipeline.render")

SELECT_LABEL = "select-visible"
BATCH_LABEL = "prepare-in-batches"


@dataclass(frozen=True, slots=True)
class RenderDecision:
    """The outcome of the pipeline for one polygon.

    Attributes:
        polygon: The source polygon (unchanged).
        points: Simplified outline to draw.
        bounds: Bounding box of ``points``.
        tolerance: Simplification tolerance used (degrees).
        visible: Whether ``bounds`` overlaps the viewport.
    """

    polygon: Polygon
    points: tuple[Point, ...]
    bounds: BoundingBox
    tolerance: float
    visible: bool

    @property
    def removed_points(self) -> int:
        """Vertices dropped by simplification."""
        return self.polygon.vertex_count - len(self.points)


def prepare_polygon(polygon: Polygon, *, zoom: float, viewport: BoundingBox) -> RenderDecision:
    """Simplify, bound and cull one polygon for the given view."""
    tolerance = get_tolerance_for_zoom(zoom)
    points = tuple(simplify_polygon(polygon.points, tolerance))
    bounds = calculate_bounds(points)
    return RenderDecision(
        polygon=polygon,
        points=points,
        bounds=bounds,
        tolerance=tolerance,
        visible=is_polygon_visible(bounds, viewport),
    )


def select_visible(
    polygons: Sequence[Polygon],
    *,
    zoom: float,
    viewport: BoundingBox,
    monitor: PerformanceMonitor | None = None,
) -> list[RenderDecision]:
    """Run the pipeline over ``polygons`` and keep only the visible ones.

    Returns:
        Decisions for visible polygons, in input order.
    """
    if monitor is not None:
        monitor.start(SELECT_LABEL)

    decisions = [prepare_polygon(p, zoom=zoom, viewport=viewport) for p in polygons]
    visible = [d for d in decisions if d.visible]

    duration_ms = monitor.end(SELECT_LABEL) if monitor is not None else None
    _log_pass("sync", len(polygons), visible, zoom, duration_ms)
    return visible


async def prepare_in_batches(
    polygons: Sequence[Polygon],
    *,
    zoom: float,
    viewport: BoundingBox,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    idle_scheduler: IdleScheduler | None = None,
    monitor: PerformanceMonitor | None = None,
    scheduler: BatchScheduler | None = None,
) -> list[RenderDecision]:
    """Like ``select_visible`` but yields to the event loop between chunks.

    Pass ``scheduler`` to keep a handle for cancelling the run (a new
    view superseding an in-flight one); otherwise one is created from
    ``chunk_size`` and ``idle_scheduler``.

    Raises:
        BatchCancelledError: If ``scheduler`` was cancelled.
    """
    if scheduler is None:
        scheduler = BatchScheduler(chunk_size, idle_scheduler=idle_scheduler)

    decisions: list[RenderDecision] = []

    def process(polygon: Polygon, _index: int) -> None:
        decision = prepare_polygon(polygon, zoom=zoom, viewport=viewport)
        if decision.visible:
            decisions.append(decision)

    if monitor is not None:
        monitor.start(BATCH_LABEL)
    await scheduler.run(polygons, process)
    duration_ms = monitor.end(BATCH_LABEL) if monitor is not None else None

    _log_pass("batched", len(polygons), decisions, zoom, duration_ms)
    return decisions


def _log_pass(
    mode: str,
    total: int,
    visible: list[RenderDecision],
    zoom: float,
    duration_ms: float | None,
) -> None:
    logger.debug(
        "Render pass | mode=%s | zoom=%s | polygons=%d | visible=%d | removed_points=%d | duration=%s",
        mode,
        zoom,
        total,
        len(visible),
        sum(d.removed_points for d in visible),
        f"{duration_ms:.3f} ms" if duration_ms is not None else "n/a",
    )


class ViewportTracker:
    """Rate-limits map events before they trigger a pipeline pass.

    Map motion is debounced (only the final view of a pan/zoom burst
    counts); pointer movement is throttled (first move per window counts,
    the rest are dropped).

    Args:
        on_view_change: Called as ``on_view_change(viewport, zoom)``.
        on_pointer_move: Called as ``on_pointer_move(lat, lng)``.
        debounce_ms: Quiet period for map motion.
        throttle_ms: Window for pointer movement.
        zoom_clamp: Applied to each reported zoom before it is passed on
            (``from_config`` uses ``MapperConfig.clamp_zoom``).
        loop: Event loop for the timers (default: running loop).
    """

    def __init__(
        self,
        on_view_change: Callable[[BoundingBox, float], object],
        on_pointer_move: Callable[[float, float], object] | None = None,
        *,
        debounce_ms: float = 300.0,
        throttle_ms: float = 16.0,
        zoom_clamp: Callable[[float], float] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._zoom_clamp = zoom_clamp
        self._view_debouncer = Debouncer(on_view_change, debounce_ms, loop=loop)
        self._pointer_throttler = (
            Throttler(on_pointer_move, throttle_ms, loop=loop) if on_pointer_move is not None else None
        )

    @classmethod
    def from_config(
        cls,
        config: MapperConfig,
        on_view_change: Callable[[BoundingBox, float], object],
        on_pointer_move: Callable[[float, float], object] | None = None,
    ) -> ViewportTracker:
        """Build a tracker with the configured delays and zoom range."""
        return cls(
            on_view_change,
            on_pointer_move,
            debounce_ms=config.map_move_debounce_ms,
            throttle_ms=config.pointer_throttle_ms,
            zoom_clamp=config.clamp_zoom,
        )

    def map_moved(self, viewport: BoundingBox, zoom: float) -> None:
        """Report the map's new extent after a pan or zoom step."""
        if self._zoom_clamp is not None:
            zoom = self._zoom_clamp(zoom)
        self._view_debouncer(viewport, zoom)

    def pointer_moved(self, lat: float, lng: float) -> bool:
        """Report a pointer move.  Returns whether it was passed through."""
        if self._pointer_throttler is None:
            return False
        return self._pointer_throttler(lat, lng)

    @property
    def view_change_pending(self) -> bool:
        return self._view_debouncer.pending

    def close(self) -> None:
        """Cancel pending timers; no callback fires after this returns."""
        self._view_debouncer.cancel()
        if self._pointer_throttler is not None:
            self._pointer_throttler.cancel()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
