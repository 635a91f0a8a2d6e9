"""Error kinds surfaced by the ingestion pipeline.

All of them derive from IngestError so callers can catch the family, and
each one maps to a distinct outcome at the HTTP layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class RejectReason(str, Enum):
    """Rule category that made a batch fail validation."""

    ROW_COUNT = "row_count"
    MISSING_ROW = "missing_row"
    MISSING_TIMESTAMP = "missing_timestamp"
    TIMESTAMP_IN_FUTURE = "timestamp_in_future"
    TIMESTAMP_TOO_OLD = "timestamp_too_old"
    MISSING_FIELD = "missing_field"
    NEGATIVE_EXECUTION_TIME = "negative_execution_time"
    NEGATIVE_VALUE = "negative_value"


class IngestError(Exception):
    """Base de errores de ingesta."""


class CsvParseError(IngestError):
    """Malformed input. Raised before any state is created."""

    def __init__(self, message: str, row_index: Optional[int] = None):
        super().__init__(message)
        self.row_index = row_index


class BatchValidationError(IngestError):
    """The batch broke one of the validation rules; nothing was persisted."""

    def __init__(
        self,
        reason: RejectReason,
        message: str,
        row_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.row_index = row_index


class StorageError(IngestError):
    """A store operation failed.

    ``stage`` is "records" when the record batch could not be written and
    "summary" when records were written but the summary upsert failed.
    """

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage
