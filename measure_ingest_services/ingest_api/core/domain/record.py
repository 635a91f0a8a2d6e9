"""Measurement rows before and after ingestion.

RawRow is what the parser hands over: fields may be missing, the timestamp
may be naive or carry any offset. Record is what gets persisted: every field
set, timestamp in UTC, tagged with the originating file.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID


@dataclass(frozen=True)
class RawRow:
    """Fila parseada del CSV, aún sin validar."""

    timestamp: Optional[datetime]
    execution_time: Optional[int]
    value: Optional[float]


@dataclass(frozen=True)
class Record:
    """One persisted measurement. Immutable once stored."""

    id: UUID
    timestamp: datetime
    execution_time: int
    value: float
    source_file: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "execution_time": self.execution_time,
            "value": self.value,
            "source_file": self.source_file,
        }
