"""Fixtures compartidos."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine

from measure_ingest_services.ingest_api.core.pipeline import IngestionPipeline
from measure_ingest_services.ingest_api.core.query import SummaryQueryService
from measure_ingest_services.ingest_api.core.validation import BatchValidator
from measure_ingest_services.ingest_api.infrastructure.persistence import (
    InMemoryRecordStore,
    InMemorySummaryStore,
    SqlRecordStore,
    SqlSummaryStore,
    ensure_schema,
)
from measure_ingest_services.ingest_api.metrics import IngestionMetricsService
from measure_ingest_services.ingest_api.transports.csv import CSVProcessor

from tests.helpers import FIXED_NOW


@pytest.fixture(autouse=True)
def _reset_metrics():
    IngestionMetricsService.reset_instance()
    yield
    IngestionMetricsService.reset_instance()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def summary_store() -> InMemorySummaryStore:
    return InMemorySummaryStore()


@pytest.fixture
def pipeline(record_store, summary_store, clock) -> IngestionPipeline:
    return IngestionPipeline(
        parser=CSVProcessor(),
        record_store=record_store,
        summary_store=summary_store,
        validator=BatchValidator(clock=clock),
        listener=IngestionMetricsService.get_instance(),
    )


@pytest.fixture
def query_service(record_store, summary_store) -> SummaryQueryService:
    return SummaryQueryService(record_store, summary_store)


@pytest.fixture
def sqlite_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'measurements.db'}",
        connect_args={"check_same_thread": False},
        future=True,
    )
    ensure_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_stores(sqlite_engine):
    return SqlRecordStore(sqlite_engine), SqlSummaryStore(sqlite_engine)
