"""Shared constants: single source of truth.

Centralises the zoom/tolerance policy thresholds, the polygon naming
scheme, and the storage key used by the persistence collaborator.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Zoom → simplification tolerance policy (degrees)
# ---------------------------------------------------------------------------

COUNTRY_MAX_ZOOM: int = 9
"""Zoom levels up to and including this get the heaviest simplification."""

CITY_MAX_ZOOM: int = 13
"""Upper bound (inclusive) of the city zoom band."""

NEIGHBOURHOOD_MAX_ZOOM: int = 16
"""Upper bound (inclusive) of the neighbourhood zoom band."""

COUNTRY_TOLERANCE: float = 0.01
CITY_TOLERANCE: float = 0.001
NEIGHBOURHOOD_TOLERANCE: float = 0.0001
BUILDING_TOLERANCE: float = 0.0
"""Building level (zoom 17+) draws polygons unsimplified."""

DEFAULT_TOLERANCE: float = NEIGHBOURHOOD_TOLERANCE
"""Tolerance used when the caller does not pick one from the zoom policy."""

# ---------------------------------------------------------------------------
# Polygons
# ---------------------------------------------------------------------------

MIN_POLYGON_POINTS: int = 3
"""A polygon can only be finalized with at least this many points."""

MIN_PREVIEW_POINTS: int = 2
"""An in-progress outline is drawable once it has this many points."""

DEFAULT_NAME_PREFIX: str = "AOI"
"""Finalized polygons are named ``"<prefix> <n>"``."""

STORAGE_KEY: str = "aoi-polygons"
"""Key under which the storage collaborator keeps the polygon collection."""

# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------

DEFAULT_CHUNK_SIZE: int = 100
"""Items processed per batch chunk between yields to the event loop."""

# ---------------------------------------------------------------------------
# Memory estimate
# ---------------------------------------------------------------------------

BYTES_PER_POINT: int = 16
"""Two 64-bit floats per coordinate pair."""

BYTES_PER_POLYGON: int = 100
"""Rough per-polygon object overhead."""

BYTES_PER_MIB: int = 1024 * 1024
