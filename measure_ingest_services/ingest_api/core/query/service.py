"""Read side: filtered summary lookup and recent records per file."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..domain.record import Record
from ..domain.stores import RecordStore, SummaryStore
from ..domain.summary import AggregateSummary
from .filters import QueryFilterBuilder, SummaryFilters

logger = logging.getLogger(__name__)

RECENT_RECORDS_LIMIT = 10


class SummaryQueryService:
    def __init__(
        self,
        record_store: RecordStore,
        summary_store: SummaryStore,
        filter_builder: Optional[QueryFilterBuilder] = None,
    ):
        self._records = record_store
        self._summaries = summary_store
        self._builder = filter_builder or QueryFilterBuilder()

    def query(self, filters: Optional[SummaryFilters] = None) -> List[AggregateSummary]:
        """Summaries matching every supplied filter; empty list when none match."""
        clauses = self._builder.build(filters)
        results = self._summaries.query_filtered(clauses)
        logger.debug("[QUERY] summaries clauses=%d found=%d", len(clauses), len(results))
        return results

    def recent_records(self, file_name: str) -> List[Record]:
        """Up to RECENT_RECORDS_LIMIT records of ``file_name``, newest first."""
        return self._records.query_recent(file_name, RECENT_RECORDS_LIMIT)
