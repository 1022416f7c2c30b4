"""Unified exception taxonomy.

Every domain exception inherits from ``AoiMapperError`` and carries
structured context fields so callers (the map UI, the storage layer)
can report failures consistently.

Taxonomy categories
-------------------
- ``ValidationError``   : input/contract violations (bad config, bad records).
- ``PermanentError``    : the operation cannot complete (e.g. cancelled batch).

Geometry functions never raise on numeric input; these exceptions live at
the configuration, storage-record and scheduling boundaries.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging.
"""

from __future__ import annotations


class AoiMapperError(Exception):
    """Base exception for all AOI mapper errors.

    Attributes:
        message: Human-readable error description.
        stage: Component where the error occurred
            (e.g. ``"config"``, ``"batch"``, ``"records"``).
        code: Machine-readable error code (e.g. ``"BATCH_CANCELLED"``).
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        return "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(AoiMapperError):
    """Input, configuration or record validation failure."""


class PermanentError(AoiMapperError):
    """The requested operation cannot complete."""


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------


class BatchCancelledError(PermanentError):
    """Raised by a batch run whose scheduler was cancelled mid-way.

    Attributes:
        processed: Number of items processed before cancellation took effect.
    """

    default_stage = "batch"
    default_code = "BATCH_CANCELLED"

    def __init__(self, processed: int) -> None:
        self.processed = processed
        super().__init__(f"Batch cancelled after {processed} item(s)")
