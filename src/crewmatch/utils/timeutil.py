"""Timestamp normalization for values arriving from document stores."""

from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import BeforeValidator
from typing_extensions import Annotated

# Epoch values above this are treated as milliseconds (year 2286 in seconds).
_EPOCH_MILLIS_THRESHOLD = 10_000_000_000


def to_instant(value: Any) -> datetime:
    """
    Normalize a timestamp-like value to an aware UTC datetime.

    Accepts datetimes, dates, ISO-8601 strings, epoch seconds or
    milliseconds, and store-native timestamp objects exposing
    ``to_datetime()`` or ``ToDatetime()``. Naive values are taken as UTC.

    Raises:
        ValueError: If the value cannot be interpreted as a point in time
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime.combine(value, time.min)
    elif isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")
    elif isinstance(value, (int, float)):
        seconds = value / 1000 if abs(value) > _EPOCH_MILLIS_THRESHOLD else value
        result = datetime.fromtimestamp(seconds, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            result = datetime.fromisoformat(text)
        except ValueError as e:
            raise ValueError(f"Unparseable timestamp string: {value!r}") from e
    elif hasattr(value, "to_datetime"):
        result = value.to_datetime()
    elif hasattr(value, "ToDatetime"):
        result = value.ToDatetime()
    else:
        raise ValueError(f"Not a timestamp: {value!r}")

    if result.tzinfo is None:
        return result.replace(tzinfo=timezone.utc)
    return result.astimezone(timezone.utc)


Instant = Annotated[datetime, BeforeValidator(to_instant)]
