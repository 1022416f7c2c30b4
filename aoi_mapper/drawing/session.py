"""Drawing state machine: point-capture gestures → finalized polygon.

States
------
- ``IDLE``       : resting state, also initial.  Gestures are ignored.
- ``CAPTURING``  : each primary gesture appends a vertex to the buffer.

Transitions
-----------
- ``start()``     IDLE → CAPTURING, buffer cleared.
- ``add_point()`` CAPTURING → CAPTURING, vertex appended.
- ``finalize()``  CAPTURING → IDLE when the buffer holds at least three
  points: a ``Polygon`` is emitted to ``on_complete`` and the buffer is
  cleared.  With fewer points nothing happens and capture continues.
- ``stop()``      CAPTURING → IDLE, buffer discarded, nothing emitted.

The session knows nothing about the map widget's gesture recognizer.
``handle_gesture`` maps the widget's physical gestures onto the logical
"add point" and "finalize" events and tells the widget, via
``GestureOutcome.suppress_default``, to skip its own default handling of
the finishing gesture (for example zoom-on-double-click) so finishing a
shape never also moves the view.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from aoi_mapper.core.config import MapperConfig
from aoi_mapper.core.constants import DEFAULT_NAME_PREFIX, MIN_POLYGON_POINTS, MIN_PREVIEW_POINTS
from aoi_mapper.models.polygon import Point, Polygon
from aoi_mapper.utils.helpers import PolygonIdFactory

logger = logging.getLogger("aoi_mapper.drawing.session")


class DrawingMode(enum.Enum):
    """Lifecycle state of a drawing session."""

    IDLE = "idle"
    CAPTURING = "capturing"


class Gesture(enum.Enum):
    """Physical gestures the map widget forwards to the session.

    Values:
        PRIMARY: Single click / tap at a map coordinate.
        FINISH:  Double click / double tap that closes the shape.
    """

    PRIMARY = "primary"
    FINISH = "finish"


@dataclass(frozen=True, slots=True)
class GestureOutcome:
    """What the session did with a gesture.

    Attributes:
        handled: The gesture changed (or was consumed by) the session.
        suppress_default: The widget must skip its own default handling.
        polygon: The polygon finalized by this gesture, if any.
    """

    handled: bool = False
    suppress_default: bool = False
    polygon: Polygon | None = None


class DrawingSession:
    """Turns a sequence of point-capture gestures into polygons.

    Args:
        on_complete: Receives each finalized polygon (e.g.
            ``PolygonCollection.add``).
        existing_count: Polygons already held by the caller; numbering
            continues after them.
        id_factory: Returns a fresh unique id per polygon.  Defaults to a
            millisecond-timestamp ``PolygonIdFactory``.
        name_prefix: Prefix of generated names (``"AOI"`` → ``"AOI 1"``).

    Not reentrant: drive a session from one thread only.
    """

    def __init__(
        self,
        on_complete: Callable[[Polygon], object],
        *,
        existing_count: int = 0,
        id_factory: Callable[[], int] | None = None,
        name_prefix: str = DEFAULT_NAME_PREFIX,
    ) -> None:
        if not callable(on_complete):
            msg = f"on_complete must be callable, got {type(on_complete).__name__}"
            raise TypeError(msg)
        self._on_complete = on_complete
        self._id_factory = id_factory or PolygonIdFactory()
        self._name_prefix = name_prefix
        self._finalized_count = existing_count
        self._mode = DrawingMode.IDLE
        self._buffer: list[Point] = []

    @classmethod
    def from_config(
        cls,
        config: MapperConfig,
        on_complete: Callable[[Polygon], object],
        *,
        existing_count: int = 0,
        id_factory: Callable[[], int] | None = None,
    ) -> DrawingSession:
        """Build a session that names polygons with the configured prefix."""
        return cls(
            on_complete,
            existing_count=existing_count,
            id_factory=id_factory,
            name_prefix=config.polygon_name_prefix,
        )

    # -- state --------------------------------------------------------------

    @property
    def mode(self) -> DrawingMode:
        """Current state."""
        return self._mode

    @property
    def is_capturing(self) -> bool:
        """Whether primary gestures currently add points."""
        return self._mode is DrawingMode.CAPTURING

    @property
    def points(self) -> tuple[Point, ...]:
        """Snapshot of the captured points in capture order."""
        return tuple(self._buffer)

    @property
    def preview_points(self) -> tuple[Point, ...]:
        """Points of the in-progress outline, once there are enough to draw."""
        if len(self._buffer) < MIN_PREVIEW_POINTS:
            return ()
        return tuple(self._buffer)

    @property
    def finalized_count(self) -> int:
        """Polygons counted for naming (existing plus finalized here)."""
        return self._finalized_count

    # -- logical events -----------------------------------------------------

    def start(self) -> None:
        """Begin capturing a new shape with an empty buffer."""
        self._buffer = []
        self._mode = DrawingMode.CAPTURING
        logger.debug("Drawing started")

    def stop(self) -> None:
        """Abandon the current shape without emitting a polygon."""
        if self._mode is DrawingMode.CAPTURING:
            logger.debug("Drawing stopped | discarded_points=%d", len(self._buffer))
        self._buffer = []
        self._mode = DrawingMode.IDLE

    def add_point(self, lat: float, lng: float) -> bool:
        """Append a vertex while capturing.

        Returns:
            ``True`` if the point was captured, ``False`` when idle.
        """
        if self._mode is not DrawingMode.CAPTURING:
            return False
        self._buffer.append((lat, lng))
        logger.debug("Point captured | lat=%.6f | lng=%.6f | count=%d", lat, lng, len(self._buffer))
        return True

    def finalize(self) -> Polygon | None:
        """Close the current shape if it has at least three points.

        ``on_complete`` runs before the session changes state.  If it
        raises, the error propagates and the session stays capturing with
        its buffer and name counter intact, so the shape can be finalized
        again.

        Returns:
            The emitted polygon, or ``None`` if idle or the shape is not
            yet closable (state and buffer are then left unchanged).
        """
        if self._mode is not DrawingMode.CAPTURING:
            return None
        if len(self._buffer) < MIN_POLYGON_POINTS:
            logger.debug(
                "Finalize ignored | points=%d | required=%d",
                len(self._buffer),
                MIN_POLYGON_POINTS,
            )
            return None

        polygon = Polygon(
            id=self._id_factory(),
            name=f"{self._name_prefix} {self._finalized_count + 1}",
            points=tuple(self._buffer),
        )
        self._on_complete(polygon)

        self._finalized_count += 1
        self._buffer = []
        self._mode = DrawingMode.IDLE
        logger.info(
            "Polygon finalized | id=%d | name=%s | vertices=%d",
            polygon.id,
            polygon.name,
            polygon.vertex_count,
        )
        return polygon

    # -- physical gestures --------------------------------------------------

    def handle_gesture(self, gesture: Gesture, lat: float = 0.0, lng: float = 0.0) -> GestureOutcome:
        """Route a physical gesture from the map widget.

        ``PRIMARY`` adds the gesture's coordinate; ``FINISH`` finalizes.
        While capturing, every ``FINISH`` asks the widget to suppress its
        default action, even when the shape is not yet closable.
        """
        if self._mode is not DrawingMode.CAPTURING:
            return GestureOutcome()

        if gesture is Gesture.PRIMARY:
            return GestureOutcome(handled=self.add_point(lat, lng))

        polygon = self.finalize()
        return GestureOutcome(handled=True, suppress_default=True, polygon=polygon)
