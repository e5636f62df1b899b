"""
timestamps.py – Turn the timestamp shapes found in records into datetimes.

Accepted shapes
---------------
* Firestore-style timestamps: an object with a ``seconds`` attribute, or a
  mapping with ``seconds`` / ``_seconds`` (plus optional nanoseconds).
* ``datetime`` and ``date`` objects.
* ``int`` / ``float`` epoch milliseconds (what a JS ``Date`` stores).
* Strings parsed with ``dateutil``: ISO 8601, ``MM/DD/YYYY``, ``DD-Mon-YYYY`` …

Every result is a timezone-aware UTC datetime.  Unparseable values return
None and are logged.
"""
from __future__ import annotations

import logging
import math
from datetime import date, datetime, time, timezone
from typing import Any, Mapping

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


def _from_epoch_seconds(seconds: Any, nanos: Any = 0) -> datetime | None:
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return None
    if not math.isfinite(seconds):
        return None
    extra = nanos / 1e9 if isinstance(nanos, (int, float)) and not isinstance(nanos, bool) else 0.0
    try:
        return datetime.fromtimestamp(seconds + extra, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse *value* into an aware UTC datetime.

    Returns None for missing values (silently) and for unparseable values
    (with a warning).
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None

    parsed: datetime | None = None
    if isinstance(value, datetime):
        parsed = _as_utc(value)
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min, tzinfo=timezone.utc)
    elif isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0))
        parsed = _from_epoch_seconds(seconds, nanos)
    elif hasattr(value, "seconds"):
        parsed = _from_epoch_seconds(
            getattr(value, "seconds", None), getattr(value, "nanoseconds", 0)
        )
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        if math.isfinite(value):
            parsed = _from_epoch_seconds(value / 1000.0)
    elif isinstance(value, str):
        try:
            parsed = _as_utc(dateutil_parser.parse(value.strip()))
        except (ValueError, OverflowError):
            parsed = None

    if parsed is None:
        logger.warning("Unparseable timestamp %r; skipped for date bucketing", value)
    return parsed


def month_key(dt: datetime) -> str:
    """Return the ``"YYYY-MM"`` bucket key for *dt*."""
    return f"{dt.year}-{dt.month:02d}"
