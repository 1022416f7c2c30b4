"""Unit tests for Douglas-Peucker polygon simplification.

Covers:
- Endpoint preservation and output length for any tolerance
- Short inputs returned unchanged
- Colinear collapse, tolerance-zero semantics
- Clamped segment distance (points beyond an endpoint)
- Equivalence with the recursive formulation
- Large inputs
"""

from __future__ import annotations

import math
import random

import pytest

from aoi_mapper.geometry.simplify import simplify_polygon, squared_segment_distance


def _recursive_reference(points: list[tuple[float, float]], tolerance: float) -> list[tuple[float, float]]:
    """Textbook recursive Douglas-Peucker used as an oracle."""
    if len(points) < 3:
        return list(points)
    sq_tolerance = tolerance * tolerance
    out = [points[0]]

    def step(first: int, last: int) -> None:
        max_sq = sq_tolerance
        index = 0
        for i in range(first + 1, last):
            d = squared_segment_distance(points[i], points[first], points[last])
            if d > max_sq:
                index = i
                max_sq = d
        if max_sq > sq_tolerance:
            if index - first > 1:
                step(first, index)
            out.append(points[index])
            if last - index > 1:
                step(index, last)

    step(0, len(points) - 1)
    out.append(points[-1])
    return out


# ===========================================================================
# Segment distance
# ===========================================================================


class TestSquaredSegmentDistance:
    """Squared point-to-segment distance with a clamped projection."""

    def test_perpendicular_distance(self) -> None:
        assert squared_segment_distance((1.0, 1.0), (0.0, 0.0), (0.0, 2.0)) == pytest.approx(1.0)

    def test_point_on_segment_is_zero(self) -> None:
        assert squared_segment_distance((0.0, 1.0), (0.0, 0.0), (0.0, 2.0)) == 0.0

    def test_beyond_end_measured_to_end(self) -> None:
        """A point on the extension past ``end`` is measured to ``end``."""
        assert squared_segment_distance((0.0, 5.0), (0.0, 0.0), (0.0, 2.0)) == pytest.approx(9.0)

    def test_before_start_measured_to_start(self) -> None:
        assert squared_segment_distance((0.0, -3.0), (0.0, 0.0), (0.0, 2.0)) == pytest.approx(9.0)

    def test_zero_length_segment(self) -> None:
        """Degenerate segment measures distance to its single point."""
        assert squared_segment_distance((3.0, 4.0), (0.0, 0.0), (0.0, 0.0)) == pytest.approx(25.0)

    def test_no_square_root(self) -> None:
        """Result is the squared distance, not the distance."""
        assert squared_segment_distance((2.0, 0.0), (0.0, -1.0), (0.0, 1.0)) == pytest.approx(4.0)


# ===========================================================================
# Simplification
# ===========================================================================


class TestSimplifyShortInputs:
    """Fewer than three points are returned unchanged."""

    @pytest.mark.parametrize(
        "points",
        [[], [(0.0, 0.0)], [(0.0, 0.0), (1.0, 1.0)]],
    )
    def test_unchanged(self, points: list[tuple[float, float]]) -> None:
        assert simplify_polygon(points, 10.0) == points

    def test_returns_new_list(self) -> None:
        points = [(0.0, 0.0), (1.0, 1.0)]
        result = simplify_polygon(points, 0.1)
        assert result is not points


class TestSimplifyBehaviour:
    """Core Douglas-Peucker behaviour."""

    def test_colinear_middle_point_collapses(self) -> None:
        assert simplify_polygon([(0, 0), (0, 1), (0, 2)], 0.0001) == [(0, 0), (0, 2)]

    def test_significant_vertex_kept(self) -> None:
        points = [(0.0, 0.0), (1.0, 1.0), (0.0, 2.0)]
        assert simplify_polygon(points, 0.5) == points

    def test_vertex_within_tolerance_removed(self) -> None:
        points = [(0.0, 0.0), (0.0005, 1.0), (0.0, 2.0)]
        assert simplify_polygon(points, 0.001) == [(0.0, 0.0), (0.0, 2.0)]

    def test_distance_equal_to_tolerance_removed(self) -> None:
        """Only distances strictly greater than the tolerance are kept."""
        points = [(0.0, 0.0), (0.5, 1.0), (0.0, 2.0)]
        assert simplify_polygon(points, 0.5) == [(0.0, 0.0), (0.0, 2.0)]

    def test_zero_tolerance_drops_only_colinear(self) -> None:
        points = [(0.0, 0.0), (0.0, 1.0), (0.0, 2.0), (1.0, 2.0), (2.0, 2.0)]
        assert simplify_polygon(points, 0.0) == [(0.0, 0.0), (0.0, 2.0), (2.0, 2.0)]

    def test_default_tolerance(self) -> None:
        points = [(0.0, 0.0), (0.00005, 1.0), (0.0, 2.0)]
        assert simplify_polygon(points) == [(0.0, 0.0), (0.0, 2.0)]

    def test_closed_ring_keeps_far_vertices(self) -> None:
        """A closed ring (first == last) keeps the vertices that define it."""
        ring = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0), (0.0, 0.0)]
        result = simplify_polygon(ring, 0.1)
        assert result[0] == ring[0]
        assert result[-1] == ring[-1]
        assert (1.0, 1.0) in result

    def test_tie_goes_to_leftmost_candidate(self) -> None:
        """(1,1) and (3,1) are both 1.0 from the chord; the scan keeps (1,1)."""
        points = [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (3.0, 1.0), (4.0, 0.0)]
        assert simplify_polygon(points, 0.9) == [(0.0, 0.0), (1.0, 1.0), (4.0, 0.0)]

    def test_equidistant_interior_points(self) -> None:
        """Two equally distant candidates both survive a small tolerance."""
        points = [(0.0, 0.0), (1.0, 1.0), (1.0, 2.0), (0.0, 3.0)]
        # After splitting at index 1, index 2 is measured against (1,1)-(0,3).
        result = simplify_polygon(points, 0.1)
        assert result == points

    def test_preserves_input_objects(self) -> None:
        """Output holds the very point objects of the input."""
        points = [[0.0, 0.0], [1.0, 1.0], [0.0, 2.0]]
        result = simplify_polygon(points, 0.1)  # type: ignore[arg-type]
        assert all(any(r is p for p in points) for r in result)


class TestSimplifyProperties:
    """Invariants over randomised inputs."""

    @pytest.mark.parametrize("seed", range(5))
    @pytest.mark.parametrize("tolerance", [0.0, 0.001, 0.05, 1.0])
    def test_endpoints_and_length(self, seed: int, tolerance: float) -> None:
        rng = random.Random(seed)
        points = [(rng.uniform(-1, 1), rng.uniform(-1, 1)) for _ in range(60)]
        result = simplify_polygon(points, tolerance)
        assert result[0] == points[0]
        assert result[-1] == points[-1]
        assert len(result) <= len(points)

    @pytest.mark.parametrize("seed", range(5))
    def test_matches_recursive_formulation(self, seed: int) -> None:
        rng = random.Random(seed)
        points = [(math.sin(i / 7) + rng.gauss(0, 0.01), i * 0.01) for i in range(300)]
        for tolerance in (0.0, 0.005, 0.02, 0.3):
            assert simplify_polygon(points, tolerance) == _recursive_reference(points, tolerance)

    def test_output_is_subsequence(self) -> None:
        rng = random.Random(42)
        points = [(rng.random(), rng.random()) for _ in range(100)]
        result = simplify_polygon(points, 0.05)
        it = iter(points)
        assert all(any(p == q for q in it) for p in result)


class TestSimplifyLargeInput:
    """Tens of thousands of points go through the explicit work stack."""

    def test_dense_convex_curve(self) -> None:
        # Strictly convex: with tolerance 0 every vertex survives.
        n = 20_000
        points = [(i * 1e-4, (i * 1e-4) ** 2) for i in range(n)]
        result = simplify_polygon(points, 0.0)
        assert result[0] == points[0]
        assert result[-1] == points[-1]
        assert len(result) == n
