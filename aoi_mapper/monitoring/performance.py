"""Named start/stop timing with aggregate statistics.

Used to instrument pipeline stages (simplification passes, batch runs,
redraws) while tuning the map tool.  A monitor is an explicitly
constructed object owned by whoever instruments with it; there is no
process-wide instance.

Known limitation: only one in-flight mark per label.  Calling
``start(label)`` again before ``end(label)`` overwrites the earlier mark,
so overlapping timings under one label measure from the latest start.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

logger = logging.getLogger("aoi_mapper.monitoring.performance")


@dataclass(frozen=True, slots=True)
class TimingStats:
    """Aggregate timings for one label, in milliseconds."""

    avg: float
    min: float
    max: float
    count: int

    def to_dict(self) -> dict[str, float | int]:
        """Serialise to ``{avg, min, max, count}``."""
        return {"avg": self.avg, "min": self.min, "max": self.max, "count": self.count}


class PerformanceMonitor:
    """Records elapsed time per label and summarises the history.

    Args:
        clock: Monotonic clock returning seconds; defaults to
            ``time.perf_counter``.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._marks: dict[str, float] = {}
        self._measures: dict[str, list[float]] = {}
        self._closed = False

    def start(self, label: str) -> None:
        """Mark the start of a timing for ``label``."""
        self._check_open()
        self._marks[label] = self._clock()

    def end(self, label: str) -> float | None:
        """Finish the timing for ``label``.

        Returns:
            Elapsed milliseconds, or ``None`` if there is no open mark
            for ``label`` (never started or already ended).
        """
        self._check_open()
        started = self._marks.pop(label, None)
        if started is None:
            return None

        duration_ms = (self._clock() - started) * 1000.0
        self._measures.setdefault(label, []).append(duration_ms)
        return duration_ms

    def get_stats(self, label: str) -> TimingStats | None:
        """Summarise recorded timings for ``label``, or ``None`` if there are none."""
        measurements = self._measures.get(label)
        if not measurements:
            return None
        return TimingStats(
            avg=sum(measurements) / len(measurements),
            min=min(measurements),
            max=max(measurements),
            count=len(measurements),
        )

    @contextmanager
    def measure(self, label: str) -> Iterator[None]:
        """Time the enclosed block under ``label``."""
        self.start(label)
        try:
            yield
        finally:
            duration_ms = self.end(label)
            if duration_ms is not None:
                logger.debug("Timing | label=%s | duration=%.3f ms", label, duration_ms)

    def clear(self) -> None:
        """Forget all open marks and recorded timings."""
        self._marks.clear()
        self._measures.clear()

    def close(self) -> None:
        """Dispose of the monitor.  Further ``start``/``end`` calls raise."""
        self.clear()
        self._closed = True

    @property
    def labels(self) -> list[str]:
        """Labels with recorded history, in first-recorded order."""
        return list(self._measures)

    def _check_open(self) -> None:
        if self._closed:
            msg = "PerformanceMonitor has been closed"
            raise RuntimeError(msg)
