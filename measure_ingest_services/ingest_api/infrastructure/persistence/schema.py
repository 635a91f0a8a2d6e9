"""Table definitions and schema setup.

Timestamps are stored as UTC. SQLite drops the offset on write, so rows
read back are re-tagged as UTC by the stores.
"""

from __future__ import annotations

import logging

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Uuid,
)
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

metadata = MetaData()

measurement_records = Table(
    "measurement_records",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True),
    Column("timestamp", DateTime(timezone=True), nullable=False),
    Column("execution_time", Integer, nullable=False),
    Column("value", Float, nullable=False),
    Column("file_name", String(255), nullable=False),
    Index("ix_measurement_records_file_name_timestamp", "file_name", "timestamp"),
)

file_summaries = Table(
    "file_summaries",
    metadata,
    Column("file_name", String(255), primary_key=True),
    Column("time_span_seconds", Integer, nullable=False),
    Column("earliest_timestamp", DateTime(timezone=True), nullable=False),
    Column("mean_execution_time", Float, nullable=False),
    Column("mean_value", Float, nullable=False),
    Column("median_value", Float, nullable=False),
    Column("min_value", Float, nullable=False),
    Column("max_value", Float, nullable=False),
)


def ensure_schema(engine: Engine) -> None:
    """Create tables if they don't exist. Safe to call multiple times."""
    logger.info("[DB] Ensuring schema exists backend=%s", engine.dialect.name)

    try:
        metadata.create_all(engine, checkfirst=True)
        logger.info("[DB] Schema ready")
    except Exception as e:
        logger.exception("[DB] Schema creation failed: %s", e)
        raise
