"""Ingestas concurrentes: nombres distintos y el mismo nombre."""

import gc
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from measure_ingest_services.ingest_api.core.domain import AggregateSummary
from measure_ingest_services.ingest_api.core.pipeline import IngestionPipeline
from measure_ingest_services.ingest_api.core.pipeline.upserter import AggregateUpserter, KeyedLocks
from measure_ingest_services.ingest_api.core.validation import BatchValidator
from measure_ingest_services.ingest_api.transports.csv import CSVProcessor

from tests.helpers import csv_with_values


def test_distinct_files_do_not_interfere(pipeline, summary_store, record_store):
    names = [f"file_{i}.csv" for i in range(8)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda i: pipeline.ingest(names[i], csv_with_values([i, i + 2])), range(8)))

    for i, name in enumerate(names):
        assert summary_store.get_by_key(name).mean_value == pytest.approx(i + 1)
    assert len(record_store) == 16


def test_same_file_ends_with_one_complete_summary(pipeline, summary_store):
    batches = {
        k: csv_with_values([k] * (k + 1), start=datetime(2024, 1, 1 + k, 8, 0))
        for k in range(1, 7)
    }

    with ThreadPoolExecutor(max_workers=6) as pool:
        list(pool.map(lambda k: pipeline.ingest("shared.csv", batches[k]), batches))

    summary = summary_store.get_by_key("shared.csv")
    # every field comes from the same batch
    k = int(summary.mean_value)
    assert summary.min_value == summary.max_value == summary.median_value == k
    assert summary.time_span_seconds == 60 * k
    assert summary.earliest_timestamp.day == 1 + k


def test_same_file_against_sqlite(sql_stores, clock):
    records, summaries = sql_stores
    pipeline = IngestionPipeline(
        parser=CSVProcessor(),
        record_store=records,
        summary_store=summaries,
        validator=BatchValidator(clock=clock),
    )

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(lambda v: pipeline.ingest("shared.csv", csv_with_values([v, v])), [1, 2, 3, 4]))

    summary = summaries.get_by_key("shared.csv")
    assert summary.min_value == summary.max_value == summary.mean_value
    assert summary.mean_value in {1.0, 2.0, 3.0, 4.0}


class TestKeyedLocks:

    def test_same_key_same_lock(self):
        locks = KeyedLocks()
        assert locks.get("a") is locks.get("a")
        assert locks.get("a") is not locks.get("b")

    def test_released_keys_are_dropped(self):
        locks = KeyedLocks()
        held = locks.get("kept.csv")
        for i in range(100):
            with locks.get(f"file_{i}.csv"):
                pass
        gc.collect()

        assert len(locks) == 1
        assert locks.get("kept.csv") is held

    def test_upsert_writes_without_reading_first(self, summary_store):
        store = MagicMock(wraps=summary_store)
        summary = AggregateSummary("a.csv", 0, datetime(2024, 1, 1), 1.0, 1.0, 1.0, 1.0, 1.0)

        AggregateUpserter(store).upsert("a.csv", summary)

        store.get_by_key.assert_not_called()
        store.upsert.assert_called_once_with(summary)
        assert summary_store.get_by_key("a.csv") == summary

    def test_upserter_rejects_mismatched_key(self, summary_store):
        summary = AggregateSummary("a.csv", 0, datetime(2024, 1, 1), 1.0, 1.0, 1.0, 1.0, 1.0)
        with pytest.raises(ValueError):
            AggregateUpserter(summary_store).upsert("b.csv", summary)
        assert summary_store.get_by_key("a.csv") is None
