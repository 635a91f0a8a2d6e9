from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _default_env_file() -> str:
    repo_root = Path(__file__).resolve().parents[2]
    return str(repo_root / ".env")


@dataclass(frozen=True)
class Settings:
    database_url: str

    csv_delimiter: str
    csv_timestamp_format: str

    # Zone assumed for timestamps that carry no offset.
    source_timezone: str

    log_level: str


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("MEASURE_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    database_url = os.getenv("DATABASE_URL", "sqlite:///./measurements.db")

    csv_delimiter = os.getenv("CSV_DELIMITER", ";")
    csv_timestamp_format = os.getenv("CSV_TIMESTAMP_FORMAT", "%Y-%m-%d %H:%M:%S.%f")

    source_timezone = os.getenv("SOURCE_TIMEZONE", "UTC")
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    return Settings(
        database_url=database_url,
        csv_delimiter=csv_delimiter,
        csv_timestamp_format=csv_timestamp_format,
        source_timezone=source_timezone,
        log_level=log_level,
    )
