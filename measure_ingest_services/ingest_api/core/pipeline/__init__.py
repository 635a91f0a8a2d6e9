"""Pipeline layer - orquestación de la ingesta."""

from .ingestion import IngestionPipeline, IngestResult, RecordParser
from .upserter import AggregateUpserter, KeyedLocks

__all__ = [
    "AggregateUpserter",
    "IngestResult",
    "IngestionPipeline",
    "KeyedLocks",
    "RecordParser",
]
