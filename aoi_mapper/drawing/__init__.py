"""Interactive polygon drawing state machine."""

from aoi_mapper.drawing.session import DrawingMode, DrawingSession, Gesture, GestureOutcome

__all__ = ["DrawingMode", "DrawingSession", "Gesture", "GestureOutcome"]
