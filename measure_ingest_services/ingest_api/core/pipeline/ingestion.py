"""Pipeline de ingesta de lotes.

Pipeline:
1. Parse (delegated to the RecordParser)
2. Batch validation (all-or-nothing, no writes on failure)
3. Normalization: uuid4 id, UTC timestamp, source file tag
4. Record batch persistence
5. Statistics over the same normalized batch
6. Summary upsert

Records are fully written before the summary upsert starts. If the upsert
fails the records stay and the summary is stale or missing; the caller gets
a StorageError and may re-drive the ingestion, which recomputes and
overwrites the summary.
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence, Union

from ..aggregation.statistics_engine import StatisticsEngine
from ..domain.errors import BatchValidationError, CsvParseError, StorageError
from ..domain.record import RawRow, Record
from ..domain.stores import RecordStore, SummaryStore
from ..domain.summary import AggregateSummary
from ..domain.time_utils import to_utc
from ..validation.batch_validator import BatchValidator
from .upserter import AggregateUpserter

logger = logging.getLogger(__name__)


class RecordParser(Protocol):
    """Turns raw delimited input into an ordered list of RawRow."""

    def parse(self, data: Any) -> List[RawRow]:
        ...


class IngestionListener(Protocol):
    """Hooks for observability (metrics). All optional for the pipeline."""

    def record_accepted(self, file_name: str, rows: int, elapsed_ms: float) -> None:
        ...

    def record_rejected(self, file_name: str, reason: str) -> None:
        ...

    def record_failed(self, file_name: str, stage: str) -> None:
        ...


@dataclass(frozen=True)
class IngestResult:
    file_name: str
    records_inserted: int
    summary: AggregateSummary


class IngestionPipeline:
    """Orquesta parse → validación → normalización → persistencia → resumen."""

    def __init__(
        self,
        parser: RecordParser,
        record_store: RecordStore,
        summary_store: SummaryStore,
        validator: Optional[BatchValidator] = None,
        statistics: Optional[StatisticsEngine] = None,
        upserter: Optional[AggregateUpserter] = None,
        assume_tz: Optional[tzinfo] = None,
        listener: Optional[IngestionListener] = None,
    ):
        """
        Args:
            parser: RecordParser for the raw input
            record_store: Where normalized records are appended
            summary_store: Where per-file summaries are upserted
            validator: BatchValidator (default one if omitted)
            statistics: StatisticsEngine (default one if omitted)
            upserter: AggregateUpserter over ``summary_store`` if omitted
            assume_tz: Zone for naive timestamps (UTC when omitted)
            listener: Optional metrics hooks
        """
        self._parser = parser
        self._records = record_store
        self._assume_tz = assume_tz
        self._validator = validator or BatchValidator(assume_tz=assume_tz)
        self._statistics = statistics or StatisticsEngine()
        self._upserter = upserter or AggregateUpserter(summary_store)
        self._listener = listener

    def ingest(self, source_identifier: str, data: Any) -> IngestResult:
        """Ingest one batch under the logical name ``source_identifier``.

        Raises:
            CsvParseError: malformed input, nothing written
            BatchValidationError: a rule failed, nothing written
            StorageError: a store write failed
        """
        started = time.perf_counter()
        logger.info("[PIPELINE] Ingesting file=%s", source_identifier)

        try:
            rows = self._parser.parse(data)
        except CsvParseError:
            self._notify("record_rejected", source_identifier, "parse_error")
            raise

        result = self._validator.check(rows)
        if not result.valid:
            self._notify("record_rejected", source_identifier, result.reason.value)
            raise BatchValidationError(result.reason, result.message or "invalid batch", result.row_index)

        records = self._normalize(source_identifier, rows)

        try:
            inserted = self._records.append_batch(records)
        except StorageError as e:
            e.stage = e.stage or "records"
            logger.error("[PIPELINE] Record write failed: file=%s err=%s", source_identifier, e)
            self._notify("record_failed", source_identifier, "records")
            raise

        summary = self._statistics.summarize(source_identifier, records)

        try:
            self._upserter.upsert(source_identifier, summary)
        except StorageError as e:
            e.stage = e.stage or "summary"
            # Records are already stored; re-ingestion repairs the summary.
            logger.error(
                "[PIPELINE] Summary upsert failed after %d records were written: file=%s err=%s",
                inserted, source_identifier, e,
            )
            self._notify("record_failed", source_identifier, "summary")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        self._notify("record_accepted", source_identifier, inserted, elapsed_ms)
        logger.info(
            "[PIPELINE] Ingested file=%s rows=%d elapsed_ms=%.1f",
            source_identifier, inserted, elapsed_ms,
        )
        return IngestResult(file_name=source_identifier, records_inserted=inserted, summary=summary)

    def ingest_path(self, path: Union[str, os.PathLike]) -> IngestResult:
        """Ingest a file from disk, named after its basename."""
        return self.ingest(Path(path).name, Path(path))

    def _normalize(self, source_file: str, rows: Sequence[RawRow]) -> List[Record]:
        return [
            Record(
                id=uuid.uuid4(),
                timestamp=to_utc(row.timestamp, self._assume_tz),
                execution_time=int(row.execution_time),
                value=float(row.value),
                source_file=source_file,
            )
            for row in rows
        ]

    def _notify(self, hook: str, *args) -> None:
        if self._listener is None:
            return
        try:
            getattr(self._listener, hook)(*args)
        except Exception:
            logger.exception("[PIPELINE] Listener hook %s failed", hook)
