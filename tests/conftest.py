"""Shared pytest fixtures for the AOI mapper test suite."""

import pytest

from aoi_mapper.models.bounds import BoundingBox
from aoi_mapper.models.polygon import Polygon

# ---------------------------------------------------------------------------
# Reference shapes (lat, lng) around Cologne, the default map view
# ---------------------------------------------------------------------------

COLOGNE_SQUARE = (
    (50.930, 6.950),
    (50.930, 6.970),
    (50.945, 6.970),
    (50.945, 6.950),
)

# A wiggly line along the Rhine: dense vertices with sub-metre jitter.
RHINE_TRACE = tuple((50.90 + i * 0.001, 6.96 + (0.00001 if i % 2 else 0.0)) for i in range(50))

DUSSELDORF_SQUARE = (
    (51.220, 6.770),
    (51.220, 6.790),
    (51.235, 6.790),
    (51.235, 6.770),
)


@pytest.fixture()
def cologne_polygon() -> Polygon:
    """A simple four-vertex polygon in central Cologne."""
    return Polygon(id=1, name="AOI 1", points=COLOGNE_SQUARE)


@pytest.fixture()
def dusseldorf_polygon() -> Polygon:
    """A four-vertex polygon in Düsseldorf, north of the Cologne viewport."""
    return Polygon(id=2, name="AOI 2", points=DUSSELDORF_SQUARE)


@pytest.fixture()
def dense_polygon() -> Polygon:
    """A 50-vertex polygon whose interior jitter collapses at low zoom."""
    return Polygon(id=3, name="AOI 3", points=RHINE_TRACE)


@pytest.fixture()
def cologne_viewport() -> BoundingBox:
    """Viewport over Cologne at city zoom."""
    return BoundingBox(min_lat=50.85, max_lat=51.00, min_lng=6.85, max_lng=7.05)
