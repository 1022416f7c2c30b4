"""Debounce and throttle wrappers for high-frequency map events.

Map motion and pointer movement fire far more often than the polygon
pipeline needs to run.  ``Debouncer`` runs a callback once a burst of
calls has gone quiet (trailing edge, last call wins); ``Throttler`` runs
it on the first call of a window and drops the rest (leading edge).

Each limiter is a small owned object holding at most one
``asyncio.TimerHandle`` on the host event loop.  ``cancel()`` guarantees
the wrapped callback is not invoked again by a timer scheduled before the
cancel; owners should cancel (or use the limiter as a context manager)
when they are torn down, otherwise a pending timer may still fire.

Not thread-safe: call a limiter only from its event loop's thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Self

logger = logging.getLogger("aoi_mapper.scheduling.rate_limit")


def _check_args(func: object, delay_ms: float, name: str) -> None:
    if not callable(func):
        msg = f"{name} requires a callable, got {type(func).__name__}"
        raise TypeError(msg)
    if delay_ms < 0:
        msg = f"{name} delay must be >= 0 ms, got {delay_ms}"
        raise ValueError(msg)


class _TimerOwner:
    """Shared loop lookup, cancel and context-manager plumbing."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def pending(self) -> bool:
        """Whether a timer is currently scheduled."""
        return self._handle is not None

    def cancel(self) -> None:
        """Cancel the scheduled timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()


class Debouncer(_TimerOwner):
    """Delay calls until ``wait_ms`` has passed without a new call.

    Every call cancels the pending one and reschedules ``func`` with the
    newest arguments.  If calls keep arriving less than ``wait_ms`` apart,
    ``func`` never runs.

    Args:
        func: Callback to run.
        wait_ms: Quiet period in milliseconds.
        loop: Event loop to schedule on; defaults to the running loop at
            the first call.

    Raises:
        TypeError: If ``func`` is not callable.
        ValueError: If ``wait_ms`` is negative.
    """

    def __init__(
        self,
        func: Callable[..., object],
        wait_ms: float,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        _check_args(func, wait_ms, "Debouncer")
        super().__init__(loop)
        self._func = func
        self.wait_ms = wait_ms

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        rescheduled = self._handle is not None
        self.cancel()
        self._handle = self._get_loop().call_later(self.wait_ms / 1000.0, self._fire, args, kwargs)
        if rescheduled:
            logger.debug("Debounce rescheduled | func=%s | wait=%.0f ms", _name(self._func), self.wait_ms)

    def _fire(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        self._handle = None
        self._func(*args, **kwargs)


class Throttler(_TimerOwner):
    """Run the first call of each ``interval_ms`` window, drop the rest.

    Dropped calls are discarded, never queued or replayed on a trailing
    edge.

    Args:
        func: Callback to run.
        interval_ms: Suppression window in milliseconds.
        loop: Event loop to schedule on; defaults to the running loop at
            the first call.

    Raises:
        TypeError: If ``func`` is not callable.
        ValueError: If ``interval_ms`` is negative.
    """

    def __init__(
        self,
        func: Callable[..., object],
        interval_ms: float,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        _check_args(func, interval_ms, "Throttler")
        super().__init__(loop)
        self._func = func
        self.interval_ms = interval_ms
        self.dropped = 0

    def __call__(self, *args: Any, **kwargs: Any) -> bool:
        """Invoke ``func`` unless inside a suppression window.

        Returns:
            ``True`` if ``func`` ran, ``False`` if the call was dropped.
        """
        if self._handle is not None:
            self.dropped += 1
            logger.debug("Throttle dropped call | func=%s | dropped=%d", _name(self._func), self.dropped)
            return False

        self._func(*args, **kwargs)
        self._handle = self._get_loop().call_later(self.interval_ms / 1000.0, self._reopen)
        return True

    def _reopen(self) -> None:
        self._handle = None


def debounce(func: Callable[..., object], wait_ms: float) -> Debouncer:
    """Wrap ``func`` in a trailing-edge ``Debouncer``."""
    return Debouncer(func, wait_ms)


def throttle(func: Callable[..., object], interval_ms: float) -> Throttler:
    """Wrap ``func`` in a leading-edge ``Throttler``."""
    return Throttler(func, interval_ms)


def _name(func: Callable[..., object]) -> str:
    return getattr(func, "__qualname__", type(func).__name__)
