"""
Time semantics utilities for injectable clocks and timestamp parsing.

Every session calculation accepts an explicit ``now``. These helpers
provide the wall-clock fallback when the caller passes nothing, and
normalize the timestamp shapes found in candle payloads to aware UTC
datetimes.
"""

from datetime import datetime, timezone
from typing import Optional, Union

# Epoch values above this are treated as milliseconds (year 2286 in seconds)
_MS_EPOCH_THRESHOLD = 10_000_000_000


def ensure_utc(ts: datetime) -> datetime:
    """
    Return an aware UTC datetime.

    Naive datetimes are interpreted as UTC; aware ones are converted.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def get_market_time(now: Optional[datetime] = None) -> datetime:
    """
    Get the reference time for session calculations.

    Args:
        now: Optional injected timestamp

    Returns:
        ``now`` as UTC, falling back to wall-clock time if unavailable
    """
    if now is not None:
        return ensure_utc(now)

    return datetime.now(timezone.utc)


def parse_timestamp(value: Union[datetime, int, float, str]) -> datetime:
    """
    Parse a candle timestamp into an aware UTC datetime.

    Accepts datetimes, epoch seconds, epoch milliseconds, numeric strings
    and ISO8601 strings (a trailing ``Z`` is accepted).

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, bool):
        raise ValueError(f"Boolean is not a timestamp: {value!r}")

    if isinstance(value, str):
        text = value.strip()
        try:
            value = float(text)
        except ValueError:
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            return ensure_utc(datetime.fromisoformat(text))

    if isinstance(value, (int, float)):
        seconds = value / 1000.0 if abs(value) >= _MS_EPOCH_THRESHOLD else float(value)
        return datetime.fromtimestamp(seconds, tz=timezone.utc)

    raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")


def format_market_time(market_ts: datetime) -> str:
    """
    Format a timestamp for logging and serialized output.

    Args:
        market_ts: Timestamp to format

    Returns:
        ISO8601 formatted string
    """
    return market_ts.isoformat()


def age_minutes(ts: datetime, now: Optional[datetime] = None) -> float:
    """
    Minutes elapsed between ``ts`` and ``now``.

    Args:
        ts: Earlier timestamp
        now: Reference time, defaults to wall-clock time

    Returns:
        Elapsed minutes (negative when ``ts`` is in the future)
    """
    reference = get_market_time(now)
    return (reference - ensure_utc(ts)).total_seconds() / 60.0
