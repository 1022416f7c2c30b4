"""Map tool configuration loaded from environment variables.

All configuration values have sensible defaults matching the map
widget the core was built for (zoom range 6-19, 300 ms map-move
debounce, one-frame pointer throttle, 100-polygon batch chunks).

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range, so bad settings surface at startup rather than
    as odd scheduling behaviour later.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from aoi_mapper.core.constants import DEFAULT_CHUNK_SIZE, DEFAULT_NAME_PREFIX
from aoi_mapper.core.exceptions import ValidationError

# Highest zoom level any common tile scheme serves.
MAX_SUPPORTED_ZOOM = 22


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        reason: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.reason = message
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class MapperConfig:
    """Immutable map tool configuration.

    Attributes:
        map_move_debounce_ms: Quiet period before a map-move refresh fires.
        pointer_throttle_ms: Minimum gap between pointer-move refreshes.
        batch_chunk_size: Polygons processed per batch chunk.
        min_zoom: Lowest zoom level the map allows.
        max_zoom: Highest zoom level the map allows.
        polygon_name_prefix: Prefix of generated polygon names.
    """

    map_move_debounce_ms: float = 300.0
    pointer_throttle_ms: float = 16.0
    batch_chunk_size: int = DEFAULT_CHUNK_SIZE
    min_zoom: int = 6
    max_zoom: int = 19
    polygon_name_prefix: str = DEFAULT_NAME_PREFIX

    @classmethod
    def from_env(cls) -> MapperConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a
                required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``AOI_BATCH_CHUNK_SIZE=abc``).
        """
        config = cls(
            map_move_debounce_ms=float(os.getenv("AOI_MAP_MOVE_DEBOUNCE_MS", "300")),
            pointer_throttle_ms=float(os.getenv("AOI_POINTER_THROTTLE_MS", "16")),
            batch_chunk_size=int(os.getenv("AOI_BATCH_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))),
            min_zoom=int(os.getenv("AOI_MIN_ZOOM", "6")),
            max_zoom=int(os.getenv("AOI_MAX_ZOOM", "19")),
            polygon_name_prefix=os.getenv("AOI_POLYGON_NAME_PREFIX", DEFAULT_NAME_PREFIX),
        )
        _validate(config)
        return config

    def clamp_zoom(self, zoom: float) -> float:
        """Clamp a requested zoom level to ``[min_zoom, max_zoom]``."""
        return max(self.min_zoom, min(self.max_zoom, zoom))


def _validate(config: MapperConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.map_move_debounce_ms < 0:
        raise ConfigValidationError(
            "AOI_MAP_MOVE_DEBOUNCE_MS",
            config.map_move_debounce_ms,
            "must be >= 0 (milliseconds)",
        )

    if config.pointer_throttle_ms < 0:
        raise ConfigValidationError(
            "AOI_POINTER_THROTTLE_MS",
            config.pointer_throttle_ms,
            "must be >= 0 (milliseconds)",
        )

    if config.batch_chunk_size < 1:
        raise ConfigValidationError(
            "AOI_BATCH_CHUNK_SIZE",
            config.batch_chunk_size,
            "must be >= 1",
        )

    if config.min_zoom < 0:
        raise ConfigValidationError("AOI_MIN_ZOOM", config.min_zoom, "must be >= 0")

    if config.max_zoom > MAX_SUPPORTED_ZOOM:
        raise ConfigValidationError(
            "AOI_MAX_ZOOM",
            config.max_zoom,
            f"must be <= {MAX_SUPPORTED_ZOOM}",
        )

    if config.min_zoom > config.max_zoom:
        raise ConfigValidationError(
            "AOI_MIN_ZOOM",
            config.min_zoom,
            f"must be <= AOI_MAX_ZOOM ({config.max_zoom})",
        )

    if not config.polygon_name_prefix.strip():
        raise ConfigValidationError(
            "AOI_POLYGON_NAME_PREFIX",
            config.polygon_name_prefix,
            "must not be empty",
        )
