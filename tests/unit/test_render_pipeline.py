"""Tests for the render pipeline and viewport event rate limiting.

Covers:
- Per-polygon simplify → bounds → cull decisions
- Synchronous and batched passes agree and keep input order
- Batched pass honours cancellation
- Optional timing through PerformanceMonitor
- ViewportTracker debounces map moves and throttles pointer moves
"""

from __future__ import annotations

import asyncio

import pytest

from aoi_mapper.core.config import MapperConfig
from aoi_mapper.core.exceptions import BatchCancelledError
from aoi_mapper.models.bounds import BoundingBox
from aoi_mapper.models.polygon import Polygon
from aoi_mapper.monitoring.performance import PerformanceMonitor
from aoi_mapper.pipeline.render import (
    BATCH_LABEL,
    SELECT_LABEL,
    ViewportTracker,
    prepare_in_batches,
    prepare_polygon,
    select_visible,
)
from aoi_mapper.scheduling.batch import BatchScheduler
from tests.conftest import COLOGNE_SQUARE, RHINE_TRACE

WAIT_MS = 100.0


class TestPreparePolygon:
    """One polygon through the pipeline."""

    def test_dense_polygon_collapses_at_country_zoom(
        self, dense_polygon: Polygon, cologne_viewport: BoundingBox
    ) -> None:
        decision = prepare_polygon(dense_polygon, zoom=6, viewport=cologne_viewport)

        assert decision.tolerance == 0.01
        assert decision.points == (RHINE_TRACE[0], RHINE_TRACE[-1])
        assert decision.removed_points == 48
        assert decision.visible is True

    def test_square_kept_at_building_zoom(
        self, cologne_polygon: Polygon, cologne_viewport: BoundingBox
    ) -> None:
        decision = prepare_polygon(cologne_polygon, zoom=18, viewport=cologne_viewport)

        assert decision.tolerance == 0.0
        assert decision.points == COLOGNE_SQUARE
        assert decision.removed_points == 0
        assert decision.bounds == BoundingBox(min_lat=50.930, max_lat=50.945, min_lng=6.950, max_lng=6.970)

    def test_polygon_outside_viewport(
        self, dusseldorf_polygon: Polygon, cologne_viewport: BoundingBox
    ) -> None:
        decision = prepare_polygon(dusseldorf_polygon, zoom=11, viewport=cologne_viewport)
        assert decision.visible is False

    def test_source_polygon_unchanged(self, dense_polygon: Polygon, cologne_viewport: BoundingBox) -> None:
        decision = prepare_polygon(dense_polygon, zoom=6, viewport=cologne_viewport)
        assert decision.polygon is dense_polygon
        assert dense_polygon.points == RHINE_TRACE


class TestSelectVisible:
    """Synchronous pass over a collection."""

    def test_culls_offscreen_polygons(
        self,
        cologne_polygon: Polygon,
        dusseldorf_polygon: Polygon,
        dense_polygon: Polygon,
        cologne_viewport: BoundingBox,
    ) -> None:
        visible = select_visible(
            [cologne_polygon, dusseldorf_polygon, dense_polygon],
            zoom=11,
            viewport=cologne_viewport,
        )
        assert [d.polygon.id for d in visible] == [1, 3]

    def test_empty_collection(self, cologne_viewport: BoundingBox) -> None:
        assert select_visible([], zoom=11, viewport=cologne_viewport) == []

    def test_records_timing(self, cologne_polygon: Polygon, cologne_viewport: BoundingBox) -> None:
        monitor = PerformanceMonitor()
        select_visible([cologne_polygon], zoom=11, viewport=cologne_viewport, monitor=monitor)
        select_visible([cologne_polygon], zoom=12, viewport=cologne_viewport, monitor=monitor)

        stats = monitor.get_stats(SELECT_LABEL)
        assert stats is not None
        assert stats.count == 2


class TestPrepareInBatches:
    """Batched pass over a collection."""

    @pytest.mark.asyncio()
    async def test_matches_synchronous_pass(
        self,
        cologne_polygon: Polygon,
        dusseldorf_polygon: Polygon,
        dense_polygon: Polygon,
        cologne_viewport: BoundingBox,
    ) -> None:
        polygons = [cologne_polygon, dusseldorf_polygon, dense_polygon] * 5

        batched = await prepare_in_batches(polygons, zoom=9, viewport=cologne_viewport, chunk_size=4)
        sync = select_visible(polygons, zoom=9, viewport=cologne_viewport)

        assert batched == sync
        assert len(batched) == 10

    @pytest.mark.asyncio()
    async def test_scheduler_from_config(
        self, cologne_polygon: Polygon, dusseldorf_polygon: Polygon, cologne_viewport: BoundingBox
    ) -> None:
        scheduler = BatchScheduler.from_config(MapperConfig(batch_chunk_size=1))
        decisions = await prepare_in_batches(
            [cologne_polygon, dusseldorf_polygon],
            zoom=11,
            viewport=cologne_viewport,
            scheduler=scheduler,
        )
        assert scheduler.chunk_size == 1
        assert [d.polygon.id for d in decisions] == [1]

    @pytest.mark.asyncio()
    async def test_records_timing(self, cologne_polygon: Polygon, cologne_viewport: BoundingBox) -> None:
        monitor = PerformanceMonitor()
        await prepare_in_batches([cologne_polygon], zoom=11, viewport=cologne_viewport, monitor=monitor)
        assert monitor.get_stats(BATCH_LABEL) is not None

    @pytest.mark.asyncio()
    async def test_cancelled_scheduler(self, cologne_polygon: Polygon, cologne_viewport: BoundingBox) -> None:
        scheduler = BatchScheduler(chunk_size=2)
        scheduler.cancel()

        with pytest.raises(BatchCancelledError):
            await prepare_in_batches(
                [cologne_polygon] * 5,
                zoom=11,
                viewport=cologne_viewport,
                scheduler=scheduler,
            )

    @pytest.mark.asyncio()
    async def test_superseded_run_cancelled_mid_way(
        self, cologne_polygon: Polygon, cologne_viewport: BoundingBox
    ) -> None:
        scheduler = BatchScheduler(chunk_size=1)
        task = asyncio.create_task(
            prepare_in_batches([cologne_polygon] * 50, zoom=11, viewport=cologne_viewport, scheduler=scheduler)
        )
        for _ in range(3):
            await asyncio.sleep(0)
        scheduler.cancel()

        with pytest.raises(BatchCancelledError) as exc_info:
            await task
        assert exc_info.value.processed < 50


class TestViewportTracker:
    """Map-event rate limiting in front of the pipeline."""

    @pytest.mark.asyncio()
    async def test_pan_burst_reports_final_view_once(self, cologne_viewport: BoundingBox) -> None:
        views: list[tuple[BoundingBox, float]] = []
        tracker = ViewportTracker(lambda viewport, zoom: views.append((viewport, zoom)), debounce_ms=WAIT_MS)

        for zoom in (10, 11, 12):
            tracker.map_moved(cologne_viewport, zoom)
            await asyncio.sleep(0.005)
        assert tracker.view_change_pending is True

        await asyncio.sleep(WAIT_MS / 1000 * 3)

        assert views == [(cologne_viewport, 12)]
        assert tracker.view_change_pending is False

    @pytest.mark.asyncio()
    async def test_pointer_moves_throttled(self) -> None:
        moves: list[tuple[float, float]] = []
        with ViewportTracker(
            lambda viewport, zoom: None,
            lambda lat, lng: moves.append((lat, lng)),
            throttle_ms=WAIT_MS,
        ) as tracker:
            results = [tracker.pointer_moved(50.9 + i * 0.001, 6.9) for i in range(4)]

        assert results == [True, False, False, False]
        assert moves == [(50.9, 6.9)]

    @pytest.mark.asyncio()
    async def test_pointer_without_callback(self) -> None:
        tracker = ViewportTracker(lambda viewport, zoom: None)
        assert tracker.pointer_moved(1.0, 2.0) is False
        tracker.close()

    @pytest.mark.asyncio()
    async def test_close_drops_pending_view(self, cologne_viewport: BoundingBox) -> None:
        views: list[object] = []
        tracker = ViewportTracker(lambda viewport, zoom: views.append(zoom), debounce_ms=WAIT_MS)

        tracker.map_moved(cologne_viewport, 11)
        tracker.close()
        await asyncio.sleep(WAIT_MS / 1000 * 3)

        assert views == []

    @pytest.mark.asyncio()
    async def test_from_config(self, cologne_viewport: BoundingBox) -> None:
        views: list[float] = []
        config = MapperConfig(map_move_debounce_ms=0, pointer_throttle_ms=0)
        tracker = ViewportTracker.from_config(config, lambda viewport, zoom: views.append(zoom))

        tracker.map_moved(cologne_viewport, 14)
        await asyncio.sleep(0.01)

        assert views == [14]

    @pytest.mark.asyncio()
    async def test_from_config_clamps_zoom(self, cologne_viewport: BoundingBox) -> None:
        views: list[float] = []
        config = MapperConfig(map_move_debounce_ms=0, min_zoom=6, max_zoom=19)
        tracker = ViewportTracker.from_config(config, lambda viewport, zoom: views.append(zoom))

        tracker.map_moved(cologne_viewport, 25)
        await asyncio.sleep(0.01)
        tracker.map_moved(cologne_viewport, 2)
        await asyncio.sleep(0.01)

        assert views == [19, 6]

    @pytest.mark.asyncio()
    async def test_clamped_zoom_drives_tolerance(
        self, dense_polygon: Polygon, cologne_viewport: BoundingBox
    ) -> None:
        """A zoom below the configured minimum uses the minimum zoom's tolerance."""
        decisions: list[float] = []
        config = MapperConfig(map_move_debounce_ms=0, min_zoom=10, max_zoom=19)

        def on_view_change(viewport: BoundingBox, zoom: float) -> None:
            decisions.extend(d.tolerance for d in select_visible([dense_polygon], zoom=zoom, viewport=viewport))

        tracker = ViewportTracker.from_config(config, on_view_change)
        tracker.map_moved(cologne_viewport, 3)
        await asyncio.sleep(0.01)

        assert decisions == [0.001]
