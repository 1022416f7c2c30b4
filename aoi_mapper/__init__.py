"""AOI Mapper drawing core.

Keeps user-drawn Area of Interest polygons responsive on an interactive
map: Douglas-Peucker simplification, viewport culling, rate limiting of
high-frequency map events, cooperative batch processing, and the drawing
state machine that turns point-capture gestures into finalized polygons.
"""

__version__ = "0.1.0"
