"""Translation of optional summary filters into predicate clauses.

A clause is ``(field, op, bound)``: the SQL store maps ``field`` to a column
and lets ``op`` build the SQL expression, the in-memory store applies ``op``
to the attribute value. Both evaluate exactly the same predicate.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

from ..domain.summary import AggregateSummary
from ..domain.time_utils import to_utc


@dataclass(frozen=True)
class SummaryFilters:
    """Optional filters; omitted ones impose no constraint. All bounds inclusive."""

    file_name: Optional[str] = None
    min_start_date: Optional[datetime] = None
    max_start_date: Optional[datetime] = None
    min_average_value: Optional[float] = None
    max_average_value: Optional[float] = None
    min_average_execution_time: Optional[float] = None
    max_average_execution_time: Optional[float] = None


class FilterClause(NamedTuple):
    field: str
    op: Callable[[Any, Any], Any]
    bound: Any


# (filter attribute, summary field, comparison)
_RANGE_FILTERS = (
    ("min_start_date", "earliest_timestamp", operator.ge),
    ("max_start_date", "earliest_timestamp", operator.le),
    ("min_average_value", "mean_value", operator.ge),
    ("max_average_value", "mean_value", operator.le),
    ("min_average_execution_time", "mean_execution_time", operator.ge),
    ("max_average_execution_time", "mean_execution_time", operator.le),
)

_DATE_FIELDS = {"earliest_timestamp"}


class QueryFilterBuilder:
    """Builds the AND-combined clause list for a SummaryFilters."""

    def build(self, filters: Optional[SummaryFilters]) -> List[FilterClause]:
        if filters is None:
            return []

        clauses: List[FilterClause] = []

        # Empty file name means "no filter"
        if filters.file_name:
            clauses.append(FilterClause("file_name", operator.eq, filters.file_name))

        for attr, field, op in _RANGE_FILTERS:
            bound = getattr(filters, attr)
            if bound is None:
                continue
            if field in _DATE_FIELDS:
                bound = to_utc(bound)
            clauses.append(FilterClause(field, op, bound))

        return clauses


def matches_all(summary: AggregateSummary, clauses: Sequence[FilterClause]) -> bool:
    """Evaluate the clauses against an in-memory summary."""
    return all(clause.op(getattr(summary, clause.field), clause.bound) for clause in clauses)
