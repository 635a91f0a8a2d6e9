"""Tests del CLI sobre una base SQLite temporal."""

import json

import pytest

from measure_ingest_services.common.db import dispose_engine
from measure_ingest_services.ingest_api.services import reset_services
from measure_ingest_services.jobs.cli import main

from tests.helpers import csv_with_values


@pytest.fixture(autouse=True)
def _cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("MEASURE_ENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("SOURCE_TIMEZONE", "UTC")
    dispose_engine()
    reset_services()
    yield
    reset_services()
    dispose_engine()


def _write(tmp_path, name, body):
    path = tmp_path / name
    path.write_bytes(body)
    return str(path)


def test_ingest_then_query(tmp_path, capsys):
    good = _write(tmp_path, "good.csv", csv_with_values([1, 3]))

    assert main(["ingest", good]) == 0
    capsys.readouterr()

    assert main(["summaries", "--min-average-value", "2"]) == 0
    (line,) = capsys.readouterr().out.strip().splitlines()
    summary = json.loads(line)
    assert summary["file_name"] == "good.csv"
    assert summary["mean_value"] == 2.0

    assert main(["recent", "good.csv"]) == 0
    values = [json.loads(l)["value"] for l in capsys.readouterr().out.strip().splitlines()]
    assert values == [3.0, 1.0]


def test_failed_file_does_not_stop_the_rest(tmp_path, capsys):
    bad = _write(tmp_path, "bad.csv", b"Date;ExecutionTime;Value\n2024-01-01 08:00:00.000;1;-1\n")
    good = _write(tmp_path, "good.csv", csv_with_values([5]))

    assert main(["ingest", bad, good]) == 1
    capsys.readouterr()

    main(["summaries"])
    names = [json.loads(l)["file_name"] for l in capsys.readouterr().out.strip().splitlines()]
    assert names == ["good.csv"]
