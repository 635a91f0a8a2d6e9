"""Health, readiness and metrics endpoints."""

import logging
import time
from dataclasses import asdict

from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from ..metrics import get_ingestion_metrics
from ..schemas import MetricsOut

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health")
def health():
    """Liveness probe: always returns ok if process is running."""
    return {"status": "ok"}


@router.get("/ready")
def ready():
    """Readiness probe: checks DB connectivity and measures latency."""
    try:
        from measure_ingest_services.common.db import get_engine

        start_time = time.time()
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        latency_ms = (time.time() - start_time) * 1000
        return {"status": "ready", "latency_ms": round(latency_ms, 2)}
    except Exception:
        # No exponer detalles del error al cliente
        logger.exception("[HEALTH] Readiness check failed")
        raise HTTPException(status_code=503, detail="not ready")


@router.get("/metrics", response_model=MetricsOut)
def metrics():
    """Ingestion counters since process start."""
    return MetricsOut(**asdict(get_ingestion_metrics().get_metrics()))
