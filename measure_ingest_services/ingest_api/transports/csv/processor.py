"""CSV processor for measurement batches.

Expected layout (header row required, column names case-insensitive):

    Date;ExecutionTime;Value
    2024-03-01 9:15:00.250;12;3.75

Reads at most ``max_rows + 1`` data rows: anything beyond that is already
an oversized batch for the validator, so the rest of the file is never
loaded.
"""

from __future__ import annotations

import io
import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from ...core.domain.errors import CsvParseError
from ...core.domain.record import RawRow
from ...core.validation.batch_validator import MAX_ROWS

logger = logging.getLogger(__name__)


class CSVProcessor:
    """Parses delimited measurement files into RawRow lists using pandas."""

    TIMESTAMP_COLUMN = "date"
    EXECUTION_TIME_COLUMN = "executiontime"
    VALUE_COLUMN = "value"

    def __init__(
        self,
        delimiter: str = ";",
        timestamp_format: str = "%Y-%m-%d %H:%M:%S.%f",
        max_rows: int = MAX_ROWS,
    ):
        """Initialize CSV processor.

        Args:
            delimiter: Field separator
            timestamp_format: strptime format tried first; anything else
                falls back to pandas' parser (ISO 8601 with offsets, etc.)
            max_rows: Largest batch the validator accepts
        """
        self.delimiter = delimiter
        self.timestamp_format = timestamp_format
        self.max_rows = max_rows

    def parse(self, data: Any) -> List[RawRow]:
        """Parse raw input into rows.

        Args:
            data: bytes, a path (str / PathLike) or a file object

        Returns:
            Parsed rows in file order; empty list for an empty file

        Raises:
            CsvParseError: missing columns or unparseable fields
        """
        source = io.BytesIO(data) if isinstance(data, (bytes, bytearray)) else data

        try:
            frame = pd.read_csv(
                source,
                sep=self.delimiter,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
                nrows=self.max_rows + 1,
            )
        except pd.errors.EmptyDataError:
            logger.info("[CSVProcessor] Empty input")
            return []
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise CsvParseError(f"unreadable CSV: {e}") from e
        except (FileNotFoundError, IsADirectoryError) as e:
            raise CsvParseError(f"cannot open {data!r}: {e}") from e

        columns = self._resolve_columns(frame)
        ts_col = columns[self.TIMESTAMP_COLUMN]
        exec_col = columns[self.EXECUTION_TIME_COLUMN]
        value_col = columns[self.VALUE_COLUMN]

        rows: List[RawRow] = []
        for idx, (ts_raw, exec_raw, value_raw) in enumerate(
            zip(frame[ts_col], frame[exec_col], frame[value_col])
        ):
            rows.append(
                RawRow(
                    timestamp=self._parse_timestamp(ts_raw, idx),
                    execution_time=self._parse_int(exec_raw, idx),
                    value=self._parse_float(value_raw, idx),
                )
            )

        logger.debug("[CSVProcessor] Parsed %d rows", len(rows))
        return rows

    def _resolve_columns(self, frame: pd.DataFrame) -> Dict[str, str]:
        by_lower = {str(col).strip().lower(): col for col in frame.columns}
        required = (self.TIMESTAMP_COLUMN, self.EXECUTION_TIME_COLUMN, self.VALUE_COLUMN)
        missing = [name for name in required if name not in by_lower]
        if missing:
            raise CsvParseError(
                f"missing column(s) {missing}; found {list(frame.columns)}"
            )
        return {name: by_lower[name] for name in required}

    def _parse_timestamp(self, raw: Any, idx: int) -> Optional[datetime]:
        raw = _clean(raw)
        if not raw:
            return None

        try:
            return datetime.strptime(raw, self.timestamp_format)
        except ValueError:
            pass

        try:
            ts = pd.to_datetime(raw)
        except (ValueError, TypeError, OverflowError) as e:
            raise CsvParseError(f"row {idx}: invalid timestamp {raw!r}", row_index=idx) from e
        if pd.isna(ts):
            return None
        return ts.to_pydatetime()

    @staticmethod
    def _parse_int(raw: Any, idx: int) -> Optional[int]:
        raw = _clean(raw)
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError as e:
            raise CsvParseError(f"row {idx}: invalid execution time {raw!r}", row_index=idx) from e

    @staticmethod
    def _parse_float(raw: Any, idx: int) -> Optional[float]:
        raw = _clean(raw)
        if not raw:
            return None
        try:
            value = float(raw)
        except ValueError as e:
            raise CsvParseError(f"row {idx}: invalid value {raw!r}", row_index=idx) from e
        if not math.isfinite(value):
            raise CsvParseError(f"row {idx}: value {raw!r} is not finite", row_index=idx)
        return value


def _clean(raw: Any) -> str:
    # Short rows come back as NaN even with dtype=str
    if not isinstance(raw, str):
        return ""
    return raw.strip()


def processor_from_settings(settings) -> CSVProcessor:
    return CSVProcessor(
        delimiter=settings.csv_delimiter,
        timestamp_format=settings.csv_timestamp_format,
    )
