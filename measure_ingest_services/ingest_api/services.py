"""Wiring of the process-wide pipeline and query service.

The pipeline is a singleton so that every request shares the same keyed
locks in the AggregateUpserter. Tests replace these dependencies through
``app.dependency_overrides`` or ``configure_services``.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from measure_ingest_services.common.config import get_settings
from measure_ingest_services.common.db import get_engine

from .core.domain.stores import RecordStore, SummaryStore
from .core.domain.time_utils import resolve_timezone
from .core.pipeline import IngestionPipeline
from .core.query import SummaryQueryService
from .core.validation import BatchValidator
from .infrastructure.persistence import SqlRecordStore, SqlSummaryStore
from .metrics import get_ingestion_metrics
from .transports.csv.processor import processor_from_settings

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_pipeline: Optional[IngestionPipeline] = None
_query_service: Optional[SummaryQueryService] = None


def configure_services(
    record_store: RecordStore,
    summary_store: SummaryStore,
) -> None:
    """Build the pipeline and query service over the given stores."""
    with _lock:
        _configure_locked(record_store, summary_store)


def _configure_locked(record_store: RecordStore, summary_store: SummaryStore) -> None:
    global _pipeline, _query_service

    settings = get_settings()
    assume_tz = resolve_timezone(settings.source_timezone)

    _pipeline = IngestionPipeline(
        parser=processor_from_settings(settings),
        record_store=record_store,
        summary_store=summary_store,
        validator=BatchValidator(assume_tz=assume_tz),
        assume_tz=assume_tz,
        listener=get_ingestion_metrics(),
    )
    _query_service = SummaryQueryService(record_store, summary_store)

    logger.info(
        "[SERVICES] Configured stores=%s/%s tz=%s",
        type(record_store).__name__, type(summary_store).__name__, settings.source_timezone,
    )


def _ensure_configured() -> None:
    if _pipeline is not None and _query_service is not None:
        return
    with _lock:
        if _pipeline is None or _query_service is None:
            engine = get_engine()
            _configure_locked(SqlRecordStore(engine), SqlSummaryStore(engine))


def get_ingestion_pipeline() -> IngestionPipeline:
    _ensure_configured()
    return _pipeline


def get_query_service() -> SummaryQueryService:
    _ensure_configured()
    return _query_service


def reset_services() -> None:
    """Drop the wired services (for testing)."""
    global _pipeline, _query_service
    with _lock:
        _pipeline = None
        _query_service = None
