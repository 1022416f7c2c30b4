"""Event-loop scheduling primitives: rate limiters and chunked batches."""

from aoi_mapper.scheduling.batch import BatchScheduler, process_in_chunks
from aoi_mapper.scheduling.rate_limit import Debouncer, Throttler, debounce, throttle

__all__ = [
    "BatchScheduler",
    "Debouncer",
    "Throttler",
    "debounce",
    "process_in_chunks",
    "throttle",
]
