"""CLI entry point: batch-ingest CSV files and inspect the results."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import List, Optional

from measure_ingest_services.common.config import get_settings
from measure_ingest_services.common.db import get_engine
from measure_ingest_services.ingest_api.core.domain.errors import IngestError
from measure_ingest_services.ingest_api.core.query import SummaryFilters
from measure_ingest_services.ingest_api.infrastructure.persistence import (
    SqlRecordStore,
    SqlSummaryStore,
    ensure_schema,
)
from measure_ingest_services.ingest_api.services import (
    configure_services,
    get_ingestion_pipeline,
    get_query_service,
)

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="measure-ingest", description="Measurement CSV batch ingestion")
    sub = p.add_subparsers(dest="command", required=True)

    ingest = sub.add_parser("ingest", help="ingest one or more CSV files")
    ingest.add_argument("paths", nargs="+")

    summaries = sub.add_parser("summaries", help="list per-file summaries")
    summaries.add_argument("--file-name")
    summaries.add_argument("--min-start-date", type=datetime.fromisoformat)
    summaries.add_argument("--max-start-date", type=datetime.fromisoformat)
    summaries.add_argument("--min-average-value", type=float)
    summaries.add_argument("--max-average-value", type=float)
    summaries.add_argument("--min-average-execution-time", type=float)
    summaries.add_argument("--max-average-execution-time", type=float)

    recent = sub.add_parser("recent", help="last 10 records of a file")
    recent.add_argument("file_name")
    return p


def _print_json(obj) -> None:
    print(json.dumps(obj, default=str, ensure_ascii=False))


def _run_ingest(paths: List[str]) -> int:
    pipeline = get_ingestion_pipeline()
    failures = 0
    for path in paths:
        try:
            result = pipeline.ingest_path(path)
        except IngestError as e:
            # Keep going with the remaining files
            failures += 1
            logger.error("Could not ingest %s: %s", path, e)
            continue
        logger.info("%s saved (%d rows)", result.file_name, result.records_inserted)
    logger.info("Ingest finished: files=%d failed=%d", len(paths), failures)
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    args = _build_parser().parse_args(argv)

    engine = get_engine(settings)
    ensure_schema(engine)
    configure_services(SqlRecordStore(engine), SqlSummaryStore(engine))

    if args.command == "ingest":
        return _run_ingest(args.paths)

    service = get_query_service()
    if args.command == "summaries":
        filters = SummaryFilters(
            file_name=args.file_name,
            min_start_date=args.min_start_date,
            max_start_date=args.max_start_date,
            min_average_value=args.min_average_value,
            max_average_value=args.max_average_value,
            min_average_execution_time=args.min_average_execution_time,
            max_average_execution_time=args.max_average_execution_time,
        )
        found = service.query(filters)
        logger.info("Found %d summaries", len(found))
        for summary in found:
            _print_json(summary.to_dict())
        return 0

    records = service.recent_records(args.file_name)
    logger.info("Found %d recent records for %s", len(records), args.file_name)
    for record in records:
        _print_json(record.to_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())
