"""AggregateSummary - estadísticas derivadas por archivo."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class AggregateSummary:
    """Statistics of the latest successful batch for one file name.

    Keyed by ``file_name``. A new batch for the same name replaces every
    field; values are never blended across ingestions.
    """

    file_name: str
    time_span_seconds: int
    earliest_timestamp: datetime
    mean_execution_time: float
    mean_value: float
    median_value: float
    min_value: float
    max_value: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
