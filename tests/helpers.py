"""Helpers para construir CSVs de prueba."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Tuple

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_csv(rows: Iterable[Tuple[str, object, object]], header: str = "Date;ExecutionTime;Value") -> bytes:
    """Build a ';'-separated CSV body."""
    lines = [header]
    lines.extend(f"{ts};{exec_time};{value}" for ts, exec_time, value in rows)
    return ("\n".join(lines) + "\n").encode("utf-8")


def ts_str(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]


def csv_with_values(values, start: datetime = datetime(2024, 1, 1, 8, 0, 0), step_seconds: int = 60) -> bytes:
    return make_csv(
        (ts_str(start + timedelta(seconds=i * step_seconds)), 10 + i, v)
        for i, v in enumerate(values)
    )
