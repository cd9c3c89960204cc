"""Timestamp normalization.

Records reach the dashboard with ``submittedAt`` in several forms: Python
datetimes (Firestore returns a datetime subclass with nanoseconds), protobuf
style objects exposing ``seconds``/``nanos``, the JSON form of a Firestore
timestamp (``{"seconds": .., "nanoseconds": ..}`` or ``_seconds``), ISO-8601
strings from the REST backend and raw epoch milliseconds. All of them are
compared as integer epoch milliseconds.
"""

import time
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any


def _from_parts(seconds: Any, nanos: Any) -> int:
    return int(seconds) * 1000 + int(nanos or 0) // 1_000_000


def to_epoch_millis(value: Any) -> int | None:
    """Normalize any supported timestamp form; ``None`` when unknown."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)
    if isinstance(value, date):
        return to_epoch_millis(datetime(value.year, value.month, value.day))
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.isdigit():
            return int(text)
        try:
            return to_epoch_millis(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            return None
    if isinstance(value, Mapping):
        for seconds_key, nanos_key in (("seconds", "nanoseconds"), ("_seconds", "_nanoseconds")):
            if seconds_key in value:
                return _from_parts(value[seconds_key], value.get(nanos_key))
        return None
    if hasattr(value, "seconds"):
        nanos = getattr(value, "nanos", None)
        if nanos is None:
            nanos = getattr(value, "nanoseconds", 0)
        return _from_parts(value.seconds, nanos)
    return None


def to_datetime(value: Any) -> datetime | None:
    """Same inputs as :func:`to_epoch_millis`, returned as an aware UTC datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    millis = to_epoch_millis(value)
    if millis is None:
        return None
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def now_millis() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)
