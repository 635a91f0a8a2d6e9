"""Interfaces de almacenamiento consumidas por el core.

The pipeline and the query service only depend on these protocols, never
on a concrete backend (SQL or in-memory).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence

from .record import Record
from .summary import AggregateSummary

if TYPE_CHECKING:
    from ..query.filters import FilterClause


class RecordStore(Protocol):
    """Append-only store of measurement records."""

    def append_batch(self, records: Sequence[Record]) -> int:
        """Persist the whole batch in one unit; return the number written.

        Raises StorageError if nothing could be written.
        """

        ...

    def query_recent(self, file_name: str, limit: int) -> List[Record]:
        """Newest ``limit`` records of ``file_name``, newest first."""

        ...


class SummaryStore(Protocol):
    """Per-file summaries keyed by file name."""

    def get_by_key(self, file_name: str) -> Optional[AggregateSummary]:
        ...

    def upsert(self, summary: AggregateSummary) -> None:
        """Atomic insert-or-replace of every field, keyed by ``file_name``."""

        ...

    def query_filtered(self, clauses: Sequence["FilterClause"]) -> List[AggregateSummary]:
        """Summaries matching every clause, ordered by file name."""

        ...
