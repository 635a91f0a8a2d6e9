"""Implementación en memoria de los stores.

Thread-safe; used by tests and by local runs without a database. Same
ordering and filtering semantics as the SQL stores.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Sequence

from ...core.domain.record import Record
from ...core.domain.summary import AggregateSummary
from ...core.query.filters import FilterClause, matches_all


class InMemoryRecordStore:
    def __init__(self) -> None:
        self._records: List[Record] = []
        self._lock = threading.Lock()

    def append_batch(self, records: Sequence[Record]) -> int:
        with self._lock:
            self._records.extend(records)
        return len(records)

    def query_recent(self, file_name: str, limit: int) -> List[Record]:
        with self._lock:
            matching = [r for r in self._records if r.source_file == file_name]
        matching.sort(key=lambda r: r.timestamp, reverse=True)
        return matching[:limit]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class InMemorySummaryStore:
    def __init__(self) -> None:
        self._summaries: Dict[str, AggregateSummary] = {}
        self._lock = threading.Lock()

    def get_by_key(self, file_name: str) -> Optional[AggregateSummary]:
        with self._lock:
            return self._summaries.get(file_name)

    def upsert(self, summary: AggregateSummary) -> None:
        # Summaries are frozen, so replacing the entry replaces every field at once.
        with self._lock:
            self._summaries[summary.file_name] = summary

    def query_filtered(self, clauses: Sequence[FilterClause]) -> List[AggregateSummary]:
        with self._lock:
            snapshot = list(self._summaries.values())
        return sorted(
            (s for s in snapshot if matches_all(s, clauses)),
            key=lambda s: s.file_name,
        )
