"""Statistics over a validated batch.

Two explicit passes:
1. one linear pass for sums, extrema and timestamp bounds
2. one sort of the values for the median

Memory bound: the sorted copy holds at most MAX_ROWS floats, since the
validator never lets a larger batch through.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from ..domain.record import Record
from ..domain.summary import AggregateSummary

logger = logging.getLogger(__name__)


def median(values: Sequence[float]) -> float:
    """Median of a non-empty sequence; mean of the two middle items when even."""
    ordered: List[float] = sorted(values)
    count = len(ordered)
    if count == 0:
        raise ValueError("median of an empty sequence")

    mid = count // 2
    if count % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


class StatisticsEngine:
    """Pure summary computation; no access to persisted state."""

    def summarize(self, file_name: str, records: Sequence[Record]) -> AggregateSummary:
        if not records:
            raise ValueError("cannot summarize an empty batch")

        first = records[0]
        min_ts = max_ts = first.timestamp
        min_value = max_value = first.value
        total_exec = 0
        total_value = 0.0
        values: List[float] = []

        for rec in records:
            if rec.timestamp < min_ts:
                min_ts = rec.timestamp
            if rec.timestamp > max_ts:
                max_ts = rec.timestamp
            if rec.value < min_value:
                min_value = rec.value
            if rec.value > max_value:
                max_value = rec.value
            total_exec += rec.execution_time
            total_value += rec.value
            values.append(rec.value)

        count = len(records)
        summary = AggregateSummary(
            file_name=file_name,
            # int() truncates toward zero
            time_span_seconds=int((max_ts - min_ts).total_seconds()),
            earliest_timestamp=min_ts,
            mean_execution_time=total_exec / count,
            mean_value=total_value / count,
            median_value=float(median(values)),
            min_value=float(min_value),
            max_value=float(max_value),
        )

        logger.debug(
            "[STATS] file=%s n=%d span=%ds mean=%.4f median=%.4f",
            file_name, count, summary.time_span_seconds, summary.mean_value, summary.median_value,
        )
        return summary
