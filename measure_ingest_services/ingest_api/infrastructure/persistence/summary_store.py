"""SQL summary store with an atomic insert-or-update primitive."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence

from sqlalchemy import and_, select, true
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ...core.domain.errors import StorageError
from ...core.domain.summary import AggregateSummary
from ...core.domain.time_utils import to_utc
from ...core.query.filters import FilterClause
from .schema import file_summaries

logger = logging.getLogger(__name__)

_VALUE_COLUMNS = (
    "time_span_seconds",
    "earliest_timestamp",
    "mean_execution_time",
    "mean_value",
    "median_value",
    "min_value",
    "max_value",
)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlSummaryStore:
    def __init__(self, engine: Engine):
        self._engine = engine
        self._insert = _UPSERT_INSERTS.get(engine.dialect.name)
        if self._insert is None:
            raise ValueError(f"no atomic upsert available for dialect {engine.dialect.name!r}")

    def get_by_key(self, file_name: str) -> Optional[AggregateSummary]:
        stmt = select(file_summaries).where(file_summaries.c.file_name == file_name)
        try:
            with self._engine.connect() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as e:
            logger.exception("[DB] Summary lookup failed file=%s", file_name)
            raise StorageError(f"summary lookup failed: {type(e).__name__}", stage="summary") from e

        return _to_summary(row) if row else None

    def upsert(self, summary: AggregateSummary) -> None:
        """Single statement keyed on file_name: no read-then-write race."""
        stmt = self._insert(file_summaries).values(**summary.to_dict())
        stmt = stmt.on_conflict_do_update(
            index_elements=[file_summaries.c.file_name],
            set_={col: stmt.excluded[col] for col in _VALUE_COLUMNS},
        )

        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("[DB] Summary upsert failed file=%s", summary.file_name)
            raise StorageError(f"summary upsert failed: {type(e).__name__}", stage="summary") from e

    def query_filtered(self, clauses: Sequence[FilterClause]) -> List[AggregateSummary]:
        conditions = [clause.op(file_summaries.c[clause.field], clause.bound) for clause in clauses]
        stmt = (
            select(file_summaries)
            .where(and_(true(), *conditions))
            .order_by(file_summaries.c.file_name)
        )

        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            logger.exception("[DB] Summary query failed clauses=%d", len(clauses))
            raise StorageError(f"summary query failed: {type(e).__name__}") from e

        return [_to_summary(row) for row in rows]


def _to_summary(row: Mapping[str, Any]) -> AggregateSummary:
    return AggregateSummary(
        file_name=row["file_name"],
        time_span_seconds=int(row["time_span_seconds"]),
        earliest_timestamp=to_utc(row["earliest_timestamp"]),
        mean_execution_time=float(row["mean_execution_time"]),
        mean_value=float(row["mean_value"]),
        median_value=float(row["median_value"]),
        min_value=float(row["min_value"]),
        max_value=float(row["max_value"]),
    )
