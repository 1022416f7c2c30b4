"""Host capability detection.

The renderer collaborator uses these flags to pick a code path; the core
itself only cares whether an idle-time scheduling primitive exists, which
decides how ``BatchScheduler`` yields between chunks.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger("aoi_mapper.core.capabilities")

IdleScheduler = Callable[[Callable[[], None]], object]
"""Schedules a zero-argument callback for when the host is idle."""

YIELD_IDLE = "idle"
YIELD_TIMER = "timer"


@dataclass(frozen=True, slots=True)
class HostCapabilities:
    """Feature flags describing the host environment.

    Attributes:
        background_threads: Worker threads can be started.
        offscreen_rendering: Geometry can be drawn off the main surface.
        idle_scheduling: An idle-time scheduling primitive is available.
        hardware_graphics: Hardware-accelerated drawing is available.
    """

    background_threads: bool = False
    offscreen_rendering: bool = False
    idle_scheduling: bool = False
    hardware_graphics: bool = False

    def to_dict(self) -> dict[str, bool]:
        """Serialise to a flat flags dict."""
        return {
            "background_threads": self.background_threads,
            "offscreen_rendering": self.offscreen_rendering,
            "idle_scheduling": self.idle_scheduling,
            "hardware_graphics": self.hardware_graphics,
        }


def detect_capabilities(
    *,
    idle_scheduler: IdleScheduler | None = None,
    offscreen_rendering: bool = False,
    hardware_graphics: bool = False,
) -> HostCapabilities:
    """Describe what the current host can do.

    Thread support is detected from the interpreter; the rendering flags
    are reported by the renderer collaborator, which is the only party
    that can know them.

    Args:
        idle_scheduler: The host's idle-time scheduling primitive, if any.
        offscreen_rendering: Whether the renderer can draw off-surface.
        hardware_graphics: Whether the renderer is hardware accelerated.
    """
    capabilities = HostCapabilities(
        background_threads=sys.platform not in ("emscripten", "wasi"),
        offscreen_rendering=offscreen_rendering,
        idle_scheduling=callable(idle_scheduler),
        hardware_graphics=hardware_graphics,
    )
    logger.debug("Host capabilities detected | %s", capabilities.to_dict())
    return capabilities


def choose_yield_strategy(capabilities: HostCapabilities) -> str:
    """Return ``"idle"`` when idle-time scheduling exists, else ``"timer"``."""
    return YIELD_IDLE if capabilities.idle_scheduling else YIELD_TIMER
