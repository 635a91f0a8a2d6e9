"""Ingestion metrics service for observability and diagnostics.

Counts accepted, rejected (by reason) and failed (by stage) batches and
tracks batch latency. Only aggregated counters, no row data.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter, deque
from dataclasses import dataclass
from datetime import datetime, timezone
from statistics import mean
from typing import Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class IngestionMetrics:
    """Snapshot of ingestion counters."""

    timestamp: str
    uptime_seconds: float
    batches_accepted: int
    batches_rejected: int
    batches_failed: int
    rows_inserted: int
    rejected_by_reason: Dict[str, int]
    failed_by_stage: Dict[str, int]
    avg_batch_ms: Optional[float]
    max_batch_ms: Optional[float]


class IngestionMetricsService:
    """Thread-safe singleton fed by the ingestion pipeline."""

    _instance: Optional["IngestionMetricsService"] = None
    _lock = threading.Lock()

    def __init__(self):
        self._start_time = time.time()
        self._accepted = 0
        self._rows = 0
        self._rejected: Counter = Counter()
        self._failed: Counter = Counter()
        self._latency_samples: deque = deque(maxlen=500)
        self._data_lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "IngestionMetricsService":
        """Get singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton (for testing)."""
        with cls._lock:
            cls._instance = None

    def record_accepted(self, file_name: str, rows: int, elapsed_ms: float) -> None:
        with self._data_lock:
            self._accepted += 1
            self._rows += rows
            self._latency_samples.append(elapsed_ms)

    def record_rejected(self, file_name: str, reason: str) -> None:
        with self._data_lock:
            self._rejected[reason] += 1
        logger.info("REJECTED file=%s reason=%s", file_name, reason)

    def record_failed(self, file_name: str, stage: str) -> None:
        with self._data_lock:
            self._failed[stage] += 1
        logger.warning("FAILED file=%s stage=%s", file_name, stage)

    def get_metrics(self) -> IngestionMetrics:
        with self._data_lock:
            samples = list(self._latency_samples)
            return IngestionMetrics(
                timestamp=datetime.now(timezone.utc).isoformat(),
                uptime_seconds=round(time.time() - self._start_time, 2),
                batches_accepted=self._accepted,
                batches_rejected=sum(self._rejected.values()),
                batches_failed=sum(self._failed.values()),
                rows_inserted=self._rows,
                rejected_by_reason=dict(self._rejected),
                failed_by_stage=dict(self._failed),
                avg_batch_ms=round(mean(samples), 2) if samples else None,
                max_batch_ms=round(max(samples), 2) if samples else None,
            )


def get_ingestion_metrics() -> IngestionMetricsService:
    """Get the ingestion metrics service singleton."""
    return IngestionMetricsService.get_instance()
