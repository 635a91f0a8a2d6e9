"""Read endpoints: filtered summaries and recent records per file."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.domain.errors import StorageError
from ..core.query import SummaryFilters, SummaryQueryService
from ..schemas import RecordOut, SummaryOut
from ..services import get_query_service

router = APIRouter(tags=["summaries"])
logger = logging.getLogger(__name__)


def _storage_unavailable(e: StorageError) -> HTTPException:
    logger.error("[QUERY] Storage error: %s", e)
    return HTTPException(status_code=503, detail="storage unavailable")


@router.get("/summaries", response_model=List[SummaryOut])
def list_summaries(
    file_name: Optional[str] = Query(default=None),
    min_start_date: Optional[datetime] = Query(default=None),
    max_start_date: Optional[datetime] = Query(default=None),
    min_average_value: Optional[float] = Query(default=None),
    max_average_value: Optional[float] = Query(default=None),
    min_average_execution_time: Optional[float] = Query(default=None),
    max_average_execution_time: Optional[float] = Query(default=None),
    service: SummaryQueryService = Depends(get_query_service),
):
    """Per-file summaries; every filter is optional and they combine with AND.

    Returns an empty list when nothing matches.
    """
    filters = SummaryFilters(
        file_name=file_name,
        min_start_date=min_start_date,
        max_start_date=max_start_date,
        min_average_value=min_average_value,
        max_average_value=max_average_value,
        min_average_execution_time=min_average_execution_time,
        max_average_execution_time=max_average_execution_time,
    )
    try:
        summaries = service.query(filters)
    except StorageError as e:
        raise _storage_unavailable(e)
    return [SummaryOut.model_validate(s) for s in summaries]


@router.get("/summaries/{file_name}", response_model=SummaryOut)
def get_summary(file_name: str, service: SummaryQueryService = Depends(get_query_service)):
    try:
        found = service.query(SummaryFilters(file_name=file_name))
    except StorageError as e:
        raise _storage_unavailable(e)
    if not found:
        raise HTTPException(status_code=404, detail=f"No summary for {file_name}")
    return SummaryOut.model_validate(found[0])


@router.get("/records/{file_name}/recent", response_model=List[RecordOut])
def recent_records(file_name: str, service: SummaryQueryService = Depends(get_query_service)):
    """Last 10 records of the file, newest first."""
    try:
        records = service.recent_records(file_name)
    except StorageError as e:
        raise _storage_unavailable(e)
    return [RecordOut.model_validate(r) for r in records]
