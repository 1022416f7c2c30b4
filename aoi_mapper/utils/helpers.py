"""Shared helper functions.

Timestamp-based polygon identifiers: ids are the creation time in epoch
milliseconds, bumped by one when two polygons are finalized within the
same millisecond so they stay unique and strictly increasing.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime


def timestamp_ms(now: datetime | None = None) -> int:
    """Return ``now`` (default: current UTC time) in epoch milliseconds."""
    if now is None:
        now = datetime.now(UTC)
    return int(now.timestamp() * 1000)


class PolygonIdFactory:
    """Produces unique, strictly increasing millisecond-timestamp ids.

    Args:
        clock: Returns the current time in epoch milliseconds.
        last_id: Highest id already in use (e.g. from stored polygons).
    """

    def __init__(self, clock: Callable[[], int] = timestamp_ms, *, last_id: int = 0) -> None:
        self._clock = clock
        self._last_id = last_id

    def __call__(self) -> int:
        candidate = self._clock()
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate
