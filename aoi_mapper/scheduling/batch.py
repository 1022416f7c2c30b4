"""Cooperative chunked processing of large polygon collections.

Running the simplify/bounds/cull pipeline over thousands of polygons in
one go would stall the event loop, and with it every pointer and map
event.  ``BatchScheduler`` splits the work into fixed-size chunks and
hands control back to the loop before each one, using the host's
idle-time scheduler when it has one and an immediate ``call_soon``
otherwise.  Those yields are the only points where other work can
interleave; items and chunks are always processed in order.

A failure in ``process_fn`` stops the run at once and propagates to the
awaiting caller unchanged.  Items processed before the failure keep their
effects.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from aoi_mapper.core.capabilities import (
    YIELD_IDLE,
    HostCapabilities,
    IdleScheduler,
    choose_yield_strategy,
    detect_capabilities,
)
from aoi_mapper.core.config import MapperConfig
from aoi_mapper.core.constants import DEFAULT_CHUNK_SIZE
from aoi_mapper.core.exceptions import BatchCancelledError

logger = logging.getLogger("aoi_mapper.scheduling.batch")

T = TypeVar("T")


class BatchScheduler:
    """Owns one chunked run and its cancellation state.

    Args:
        chunk_size: Items per chunk (``>= 1``).
        idle_scheduler: Host primitive that runs a zero-argument callback
            when the host is idle.
        capabilities: Host capability flags deciding the yield strategy.
            Defaults to probing the host with ``idle_scheduler``.  The
            ``"timer"`` strategy (or no ``idle_scheduler``) yields with
            ``call_soon``.

    Raises:
        ValueError: If ``chunk_size`` is less than 1.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        *,
        idle_scheduler: IdleScheduler | None = None,
        capabilities: HostCapabilities | None = None,
    ) -> None:
        if chunk_size < 1:
            msg = f"chunk_size must be >= 1, got {chunk_size}"
            raise ValueError(msg)
        self.chunk_size = chunk_size
        if capabilities is None:
            capabilities = detect_capabilities(idle_scheduler=idle_scheduler)
        self.yield_strategy = choose_yield_strategy(capabilities)
        self._idle_scheduler = idle_scheduler if self.yield_strategy == YIELD_IDLE else None
        self._cancelled = False
        self._waiter: asyncio.Future[None] | None = None

    @classmethod
    def from_config(
        cls,
        config: MapperConfig,
        *,
        idle_scheduler: IdleScheduler | None = None,
        capabilities: HostCapabilities | None = None,
    ) -> BatchScheduler:
        """Build a scheduler with the configured chunk size."""
        return cls(config.batch_chunk_size, idle_scheduler=idle_scheduler, capabilities=capabilities)

    @property
    def cancelled(self) -> bool:
        """Whether ``cancel()`` has been called."""
        return self._cancelled

    def cancel(self) -> None:
        """Stop the run.  ``process_fn`` is not called again after this returns."""
        self._cancelled = True
        waiter = self._waiter
        if waiter is not None and not waiter.done():
            waiter.set_result(None)

    async def run(
        self,
        items: Sequence[T],
        process_fn: Callable[[T, int], object],
    ) -> None:
        """Apply ``process_fn(item, index)`` to every item, chunk by chunk.

        ``index`` is the item's position in ``items``.

        Raises:
            BatchCancelledError: If the scheduler was cancelled.
            Exception: Whatever ``process_fn`` raised, unchanged.
        """
        total = len(items)
        processed = 0

        for start in range(0, total, self.chunk_size):
            await self._yield_to_host()
            if self._cancelled:
                raise BatchCancelledError(processed)

            chunk_index = start // self.chunk_size
            try:
                for offset, item in enumerate(items[start : start + self.chunk_size]):
                    if self._cancelled:
                        raise BatchCancelledError(processed)
                    process_fn(item, start + offset)
                    processed += 1
            except BatchCancelledError:
                raise
            except Exception:
                logger.warning(
                    "Batch aborted | chunk=%d | processed=%d/%d",
                    chunk_index,
                    processed,
                    total,
                )
                raise

        logger.debug("Batch complete | items=%d | chunk_size=%d", total, self.chunk_size)

    async def _yield_to_host(self) -> None:
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()
        self._waiter = waiter

        def resume() -> None:
            if not waiter.done():
                waiter.set_result(None)

        if self._idle_scheduler is not None:
            self._idle_scheduler(resume)
        else:
            loop.call_soon(resume)

        try:
            await waiter
        finally:
            self._waiter = None


async def process_in_chunks(
    items: Sequence[T],
    process_fn: Callable[[T, int], object],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    *,
    idle_scheduler: IdleScheduler | None = None,
) -> None:
    """Process ``items`` in yielding chunks with a one-off ``BatchScheduler``."""
    scheduler = BatchScheduler(chunk_size, idle_scheduler=idle_scheduler)
    await scheduler.run(items, process_fn)
