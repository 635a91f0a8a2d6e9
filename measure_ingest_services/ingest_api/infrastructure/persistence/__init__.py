"""Persistence infrastructure for records and per-file summaries."""

from .memory import InMemoryRecordStore, InMemorySummaryStore
from .record_store import SqlRecordStore
from .schema import ensure_schema, file_summaries, measurement_records, metadata
from .summary_store import SqlSummaryStore

__all__ = [
    "InMemoryRecordStore",
    "InMemorySummaryStore",
    "SqlRecordStore",
    "SqlSummaryStore",
    "ensure_schema",
    "file_summaries",
    "measurement_records",
    "metadata",
]
