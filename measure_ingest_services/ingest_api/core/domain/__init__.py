"""Domain layer - immutable records, summaries and error types."""

from .errors import BatchValidationError, CsvParseError, IngestError, RejectReason, StorageError
from .record import RawRow, Record
from .summary import AggregateSummary
from .time_utils import EPOCH_FLOOR, to_utc, utc_now

__all__ = [
    "AggregateSummary",
    "BatchValidationError",
    "CsvParseError",
    "EPOCH_FLOOR",
    "IngestError",
    "RawRow",
    "Record",
    "RejectReason",
    "StorageError",
    "to_utc",
    "utc_now",
]
