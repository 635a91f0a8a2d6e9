from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    timestamp: datetime
    execution_time: int
    value: float
    source_file: str


class SummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    file_name: str
    time_span_seconds: int
    earliest_timestamp: datetime
    mean_execution_time: float
    mean_value: float
    median_value: float
    min_value: float
    max_value: float


class IngestResponse(BaseModel):
    file_name: str
    records_inserted: int = Field(..., ge=0)
    summary: SummaryOut


class IngestErrorDetail(BaseModel):
    error: str
    reason: Optional[str] = None
    row_index: Optional[int] = None
    message: str


class MetricsOut(BaseModel):
    timestamp: str
    uptime_seconds: float
    batches_accepted: int
    batches_rejected: int
    batches_failed: int
    rows_inserted: int
    rejected_by_reason: Dict[str, int] = Field(default_factory=dict)
    failed_by_stage: Dict[str, int] = Field(default_factory=dict)
    avg_batch_ms: Optional[float] = None
    max_batch_ms: Optional[float] = None

