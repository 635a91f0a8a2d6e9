"""Tests del cableado de servicios."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from measure_ingest_services.ingest_api import services


@pytest.fixture(autouse=True)
def _fresh_services(tmp_path, monkeypatch):
    monkeypatch.setenv("MEASURE_ENV_FILE", str(tmp_path / "missing.env"))
    services.reset_services()
    yield
    services.reset_services()


def test_concurrent_first_use_builds_one_pipeline(sqlite_engine, monkeypatch):
    calls = []

    def slow_engine():
        calls.append(1)
        time.sleep(0.05)
        return sqlite_engine

    monkeypatch.setattr(services, "get_engine", slow_engine)
    start = threading.Barrier(8)

    def first_request(_):
        start.wait()
        return services.get_ingestion_pipeline()

    with ThreadPoolExecutor(max_workers=8) as pool:
        pipelines = list(pool.map(first_request, range(8)))

    assert len(calls) == 1
    assert all(p is pipelines[0] for p in pipelines)
    assert services.get_query_service() is services.get_query_service()


def test_configure_services_replaces_wiring(record_store, summary_store):
    services.configure_services(record_store, summary_store)
    first = services.get_ingestion_pipeline()

    services.configure_services(record_store, summary_store)

    assert services.get_ingestion_pipeline() is not first
