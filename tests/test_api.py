"""Tests HTTP con TestClient (stores en memoria vía dependency_overrides)."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from measure_ingest_services.ingest_api.core.domain import StorageError
from measure_ingest_services.ingest_api.main import create_app
from measure_ingest_services.ingest_api.services import get_ingestion_pipeline, get_query_service

from tests.helpers import csv_with_values, make_csv

API_KEY = "test-key-123"


@pytest.fixture
def app(pipeline, query_service, monkeypatch):
    monkeypatch.delenv("INGEST_API_KEY", raising=False)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("INGEST_DEBUG_ERRORS", raising=False)

    app = create_app()
    app.dependency_overrides[get_ingestion_pipeline] = lambda: pipeline
    app.dependency_overrides[get_query_service] = lambda: query_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


def _upload(client, name, body, headers=None, **form):
    return client.post(
        "/ingest/csv",
        files={"file": (name, body, "text/csv")},
        data=form or None,
        headers=headers or {},
    )


class TestIngestEndpoint:

    def test_upload_creates_summary(self, client):
        response = _upload(client, "a.csv", csv_with_values([2, 4, 9]))

        assert response.status_code == 201
        body = response.json()
        assert body["file_name"] == "a.csv"
        assert body["records_inserted"] == 3
        assert body["summary"]["median_value"] == 4.0
        assert body["summary"]["min_value"] == 2.0
        assert body["summary"]["max_value"] == 9.0

    def test_explicit_name_wins_and_is_basename(self, client):
        response = _upload(client, "upload.csv", csv_with_values([1]), file_name="C:\\data\\real.csv")

        assert response.status_code == 201
        assert response.json()["file_name"] == "real.csv"

    def test_invalid_batch_is_422(self, client, record_store):
        body = make_csv([("2024-01-01 08:00:00.000", -1, 1.0)])

        response = _upload(client, "bad.csv", body)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["error"] == "validation_error"
        assert detail["reason"] == "negative_execution_time"
        assert detail["row_index"] == 0
        assert len(record_store) == 0

    def test_malformed_csv_is_422(self, client):
        response = _upload(client, "bad.csv", b"Date;Value\n2024-01-01;1\n")

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "parse_error"

    def test_storage_error_is_503_without_details(self, app, client):
        failing = MagicMock()
        failing.ingest.side_effect = StorageError("password=secret", stage="records")
        app.dependency_overrides[get_ingestion_pipeline] = lambda: failing

        response = _upload(client, "a.csv", csv_with_values([1]))

        assert response.status_code == 503
        detail = response.json()["detail"]
        assert detail["reason"] == "records"
        assert "secret" not in detail["message"]


class TestApiKey:

    def test_missing_key_rejected(self, client, monkeypatch):
        monkeypatch.setenv("INGEST_API_KEY", API_KEY)
        assert _upload(client, "a.csv", csv_with_values([1])).status_code == 401

    def test_wrong_key_rejected(self, client, monkeypatch):
        monkeypatch.setenv("INGEST_API_KEY", API_KEY)
        response = _upload(client, "a.csv", csv_with_values([1]), headers={"X-API-Key": "nope"})
        assert response.status_code == 401

    def test_valid_key_accepted(self, client, monkeypatch):
        monkeypatch.setenv("INGEST_API_KEY", API_KEY)
        response = _upload(client, "a.csv", csv_with_values([1]), headers={"X-API-Key": API_KEY})
        assert response.status_code == 201

    def test_unset_key_in_production_is_500(self, client, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        assert _upload(client, "a.csv", csv_with_values([1])).status_code == 500


class TestReadEndpoints:

    @pytest.fixture(autouse=True)
    def _data(self, client):
        assert _upload(client, "low.csv", csv_with_values([1, 2, 3])).status_code == 201
        assert _upload(client, "high.csv", csv_with_values([100, 200, 300])).status_code == 201

    def test_list_all(self, client):
        response = client.get("/summaries")
        assert response.status_code == 200
        assert [s["file_name"] for s in response.json()] == ["high.csv", "low.csv"]

    def test_list_filtered(self, client):
        response = client.get("/summaries", params={"min_average_value": 50})
        assert [s["file_name"] for s in response.json()] == ["high.csv"]

        response = client.get("/summaries", params={"min_start_date": "2025-01-01T00:00:00Z"})
        assert response.json() == []

    def test_get_one(self, client):
        response = client.get("/summaries/low.csv")
        assert response.status_code == 200
        assert response.json()["mean_value"] == 2.0

    def test_get_missing_is_404(self, client):
        assert client.get("/summaries/nope.csv").status_code == 404

    def test_recent_records(self, client):
        response = client.get("/records/high.csv/recent")
        assert response.status_code == 200
        assert [r["value"] for r in response.json()] == [300.0, 200.0, 100.0]


class TestHealth:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_metrics(self, client):
        _upload(client, "a.csv", csv_with_values([1, 2]))
        _upload(client, "bad.csv", b"")

        body = client.get("/metrics").json()
        assert body["batches_accepted"] == 1
        assert body["rows_inserted"] == 2
        assert body["rejected_by_reason"] == {"row_count": 1}
