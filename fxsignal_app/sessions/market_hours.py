"""
Forex market hours and trading session names.

The forex week closes Friday 22:00 UTC and reopens Sunday 22:00 UTC.
All functions take an injectable ``now``; naive datetimes are read as UTC.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union

from ..config.defaults import SessionParams
from ..utils.time import age_minutes, ensure_utc, get_market_time, parse_timestamp

MARKET_CLOSED = "Market Closed"
ASIAN_SESSION = "Asian Session"
OVERLAP_SESSION = "US-EU Overlap"
EUROPEAN_SESSION = "European Session"
US_SESSION = "US Session"

_WEEK = timedelta(days=7)


@dataclass(frozen=True)
class MarketSession:
    name: str
    is_open: bool
    next_open_time: Optional[datetime] = None
    next_close_time: Optional[datetime] = None


def _week_start(now: datetime) -> datetime:
    """Monday 00:00 UTC of the week containing ``now``."""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=now.weekday())


def _offset(weekday: int, hour: int) -> timedelta:
    return timedelta(days=weekday, hours=hour)


def is_market_closed(now: datetime, params: Optional[SessionParams] = None) -> bool:
    """True between the weekly close and the weekly reopen."""
    params = params or SessionParams()
    now = ensure_utc(now)

    elapsed = now - _week_start(now)
    close_at = _offset(params.close_weekday, params.close_hour)
    open_at = _offset(params.open_weekday, params.open_hour)

    if close_at <= open_at:
        return close_at <= elapsed < open_at
    # Closed window wraps over the Monday 00:00 week boundary
    return elapsed >= close_at or elapsed < open_at


def _next_occurrence(now: datetime, weekday: int, hour: int) -> datetime:
    """First weekday/hour boundary strictly after ``now``."""
    candidate = _week_start(now) + _offset(weekday, hour)
    while candidate <= now:
        candidate += _WEEK
    return candidate


def get_session_name(utc_hour: int) -> str:
    """
    Name the trading session for a UTC hour.

    Buckets overlap in hour space, so they are checked in a fixed order:
    Asian [22, 8), then US-EU Overlap [13, 17), then European [8, 16),
    otherwise US.
    """
    if utc_hour >= 22 or utc_hour < 8:
        return ASIAN_SESSION
    if 13 <= utc_hour < 17:
        return OVERLAP_SESSION
    if 8 <= utc_hour < 16:
        return EUROPEAN_SESSION
    return US_SESSION


def check_market_hours(now: Optional[datetime] = None,
                       params: Optional[SessionParams] = None) -> MarketSession:
    """
    Compute market state at ``now``.

    Args:
        now: Reference time, defaults to wall-clock UTC
        params: Weekly close/open boundaries

    Returns:
        MarketSession with ``next_open_time`` when closed and
        ``next_close_time`` when open
    """
    params = params or SessionParams()
    now = get_market_time(now)

    if is_market_closed(now, params):
        return MarketSession(
            name=MARKET_CLOSED,
            is_open=False,
            next_open_time=_next_occurrence(now, params.open_weekday, params.open_hour),
        )

    return MarketSession(
        name=get_session_name(now.hour),
        is_open=True,
        next_close_time=_next_occurrence(now, params.close_weekday, params.close_hour),
    )


def get_last_market_close(now: Optional[datetime] = None,
                          params: Optional[SessionParams] = None) -> datetime:
    """Most recent weekly close at or before ``now``."""
    params = params or SessionParams()
    now = get_market_time(now)

    candidate = _week_start(now) + _offset(params.close_weekday, params.close_hour)
    while candidate > now:
        candidate -= _WEEK
    return candidate


def is_data_stale(timestamp: Union[datetime, int, float, str],
                  max_age_minutes: Optional[float] = None,
                  now: Optional[datetime] = None,
                  params: Optional[SessionParams] = None) -> bool:
    """
    Check whether market data is older than ``max_age_minutes``.

    Args:
        timestamp: Data timestamp as a datetime, epoch value or ISO8601 string
        max_age_minutes: Maximum acceptable age, defaults to
            ``params.stale_after_minutes``
        now: Reference time, defaults to wall-clock UTC
        params: Session parameters supplying the default age limit
    """
    if max_age_minutes is None:
        max_age_minutes = (params or SessionParams()).stale_after_minutes
    return age_minutes(parse_timestamp(timestamp), now) > max_age_minutes
