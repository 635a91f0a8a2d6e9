"""Validador de lotes parseados.

All-or-nothing: a single bad row rejects the whole batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Callable, Optional, Sequence

from ..domain.errors import RejectReason
from ..domain.record import RawRow
from ..domain.time_utils import EPOCH_FLOOR, to_utc, utc_now

logger = logging.getLogger(__name__)

MIN_ROWS = 1
MAX_ROWS = 10_000


@dataclass(frozen=True)
class BatchValidationResult:
    """Resultado de validación de un lote."""

    valid: bool
    reason: Optional[RejectReason] = None
    row_index: Optional[int] = None
    message: Optional[str] = None


_OK = BatchValidationResult(valid=True)


class BatchValidator:
    """Checks a parsed batch against the row-count and per-row rules.

    Rules:
    - ``MIN_ROWS <= len(batch) <= MAX_ROWS``
    - every row present
    - timestamp present, ``EPOCH_FLOOR <= timestamp <= now`` (UTC)
    - ``execution_time >= 0`` and ``value >= 0``
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        assume_tz: Optional[tzinfo] = None,
    ):
        """
        Args:
            clock: Source of "now"; must return an aware datetime
            assume_tz: Zone for naive timestamps (UTC when omitted)
        """
        self._clock = clock
        self._assume_tz = assume_tz

    def validate(self, batch: Optional[Sequence[Optional[RawRow]]]) -> bool:
        return self.check(batch).valid

    def check(self, batch: Optional[Sequence[Optional[RawRow]]]) -> BatchValidationResult:
        """Validate the batch and report the first broken rule."""
        if batch is None:
            return BatchValidationResult(False, RejectReason.ROW_COUNT, None, "batch is missing")

        count = len(batch)
        if not (MIN_ROWS <= count <= MAX_ROWS):
            return BatchValidationResult(
                False,
                RejectReason.ROW_COUNT,
                None,
                f"row count {count} outside [{MIN_ROWS}, {MAX_ROWS}]",
            )

        now = to_utc(self._clock())
        for idx, row in enumerate(batch):
            result = self._check_row(idx, row, now)
            if not result.valid:
                logger.warning(
                    "[VALIDATOR] Batch rejected: reason=%s row=%s %s",
                    result.reason.value,
                    idx,
                    result.message,
                )
                return result

        return _OK

    def _check_row(self, idx: int, row: Optional[RawRow], now: datetime) -> BatchValidationResult:
        if row is None:
            return BatchValidationResult(False, RejectReason.MISSING_ROW, idx, "row is missing")

        if row.timestamp is None:
            return BatchValidationResult(False, RejectReason.MISSING_TIMESTAMP, idx, "timestamp is missing")

        try:
            ts = to_utc(row.timestamp, self._assume_tz)
        except OverflowError:
            # Conversion to UTC fell off the datetime range
            if row.timestamp.year <= EPOCH_FLOOR.year:
                return BatchValidationResult(
                    False, RejectReason.TIMESTAMP_TOO_OLD, idx, f"timestamp {row.timestamp} is before {EPOCH_FLOOR.date()}"
                )
            return BatchValidationResult(
                False, RejectReason.TIMESTAMP_IN_FUTURE, idx, f"timestamp {row.timestamp} is in the future"
            )
        if ts > now:
            return BatchValidationResult(
                False, RejectReason.TIMESTAMP_IN_FUTURE, idx, f"timestamp {ts.isoformat()} is in the future"
            )
        if ts < EPOCH_FLOOR:
            return BatchValidationResult(
                False, RejectReason.TIMESTAMP_TOO_OLD, idx, f"timestamp {ts.isoformat()} is before {EPOCH_FLOOR.date()}"
            )

        if row.execution_time is None or row.value is None:
            return BatchValidationResult(False, RejectReason.MISSING_FIELD, idx, "execution_time or value is missing")

        if row.execution_time < 0:
            return BatchValidationResult(
                False, RejectReason.NEGATIVE_EXECUTION_TIME, idx, f"execution_time {row.execution_time} < 0"
            )

        if row.value < 0:
            return BatchValidationResult(False, RejectReason.NEGATIVE_VALUE, idx, f"value {row.value} < 0")

        return _OK
