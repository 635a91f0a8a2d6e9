"""SQL record store (SQLAlchemy Core)."""

from __future__ import annotations

import logging
from typing import List, Sequence

from sqlalchemy import insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ...core.domain.errors import StorageError
from ...core.domain.record import Record
from ...core.domain.time_utils import to_utc
from .schema import measurement_records

logger = logging.getLogger(__name__)


class SqlRecordStore:
    """Append-only record table.

    A batch is written with one executemany inside one transaction, so it
    is either fully stored or not at all.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    def append_batch(self, records: Sequence[Record]) -> int:
        if not records:
            return 0

        values = [
            {
                "id": r.id,
                "timestamp": r.timestamp,
                "execution_time": r.execution_time,
                "value": r.value,
                "file_name": r.source_file,
            }
            for r in records
        ]

        try:
            with self._engine.begin() as conn:
                conn.execute(insert(measurement_records), values)
        except SQLAlchemyError as e:
            logger.exception("[DB] Record batch insert failed rows=%d", len(values))
            raise StorageError(f"record batch insert failed: {type(e).__name__}", stage="records") from e

        return len(values)

    def query_recent(self, file_name: str, limit: int) -> List[Record]:
        stmt = (
            select(measurement_records)
            .where(measurement_records.c.file_name == file_name)
            .order_by(measurement_records.c.timestamp.desc())
            .limit(limit)
        )

        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            logger.exception("[DB] Recent records query failed file=%s", file_name)
            raise StorageError(f"recent records query failed: {type(e).__name__}") from e

        return [
            Record(
                id=row["id"],
                timestamp=to_utc(row["timestamp"]),
                execution_time=int(row["execution_time"]),
                value=float(row["value"]),
                source_file=row["file_name"],
            )
            for row in rows
        ]
