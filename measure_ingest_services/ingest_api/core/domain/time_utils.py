"""Timestamp normalization.

Every comparison downstream (validation window, ordering, range filters)
works on aware UTC datetimes produced by ``to_utc``.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

import pandas as pd

EPOCH_FLOOR = datetime(2000, 1, 1, tzinfo=timezone.utc)


def resolve_timezone(name: Union[str, tzinfo, None]) -> tzinfo:
    """Resolve a zone name ("UTC", "Europe/Moscow") to a tzinfo."""
    if name is None:
        return timezone.utc
    if isinstance(name, tzinfo):
        return name
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def to_utc(value: Union[datetime, pd.Timestamp], assume_tz: Optional[tzinfo] = None) -> datetime:
    """Convert any timestamp to an aware UTC ``datetime``.

    Naive values are interpreted in ``assume_tz`` (UTC when omitted);
    aware values are converted. pandas Timestamps are unwrapped first.
    """
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()

    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        value = value.replace(tzinfo=assume_tz or timezone.utc)

    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
