from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from measure_ingest_services import __version__
from measure_ingest_services.common.config import get_settings
from measure_ingest_services.common.db import dispose_engine, get_engine

from .endpoints import health_router, summaries_router
from .infrastructure.persistence import ensure_schema
from .transports.csv import csv_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


@asynccontextmanager
async def _lifespan(app: FastAPI):
    ensure_schema(get_engine())
    logger.info("Measurement ingest service started")
    yield
    dispose_engine()
    logger.info("Measurement ingest service stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Measurement Ingest Service", version=__version__, lifespan=_lifespan)
    app.include_router(health_router)
    app.include_router(csv_router)
    app.include_router(summaries_router)
    return app


app = create_app()
