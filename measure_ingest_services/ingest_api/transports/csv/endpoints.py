"""CSV ingestion endpoints."""

from __future__ import annotations

import logging
import os
from pathlib import PurePath

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from ...auth import require_api_key
from ...core.domain.errors import BatchValidationError, CsvParseError, StorageError
from ...core.pipeline import IngestionPipeline
from ...schemas import IngestErrorDetail, IngestResponse, SummaryOut
from ...services import get_ingestion_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ingest"])


def _logical_file_name(explicit: str | None, uploaded: str | None) -> str:
    name = (explicit or uploaded or "").strip()
    # Client paths may use either separator
    return PurePath(name.replace("\\", "/")).name


@router.post(
    "/ingest/csv",
    response_model=IngestResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_api_key)],
    summary="Import a measurement CSV file",
)
def ingest_csv(
    file: UploadFile = File(...),
    file_name: str | None = Form(None),
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
):
    """Import one CSV file as an atomic batch.

    The whole file is rejected if any row is invalid. Re-uploading a file
    with the same name replaces its summary.

    Args:
        file: ``Date;ExecutionTime;Value`` CSV
        file_name: Optional logical name (defaults to the uploaded file name)

    Returns:
        Rows inserted and the recomputed summary
    """
    name = _logical_file_name(file_name, file.filename)
    if not name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="file name is required")

    try:
        result = pipeline.ingest(name, file.file)
    except CsvParseError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=IngestErrorDetail(
                error="parse_error", row_index=e.row_index, message=str(e)
            ).model_dump(),
        )
    except BatchValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=IngestErrorDetail(
                error="validation_error", reason=e.reason.value, row_index=e.row_index, message=str(e)
            ).model_dump(),
        )
    except StorageError as e:
        detail = IngestErrorDetail(error="storage_error", reason=e.stage, message="storage unavailable")
        if os.getenv("INGEST_DEBUG_ERRORS", "").strip() == "1":
            detail.message = str(e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail.model_dump())
    finally:
        file.file.close()

    logger.info("[CSV] Imported file=%s rows=%d", name, result.records_inserted)
    return IngestResponse(
        file_name=result.file_name,
        records_inserted=result.records_inserted,
        summary=SummaryOut.model_validate(result.summary),
    )
