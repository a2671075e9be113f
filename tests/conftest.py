"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

import pytest

from fxsignal_app.data.models import Candle

START = datetime(2024, 1, 3, 0, 0, 0, tzinfo=timezone.utc)  # Wednesday


def build_candles(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Optional[Sequence[float]] = None,
    start: datetime = START,
    step: timedelta = timedelta(hours=1),
) -> List[Candle]:
    """Build hourly candles; open equals close, close defaults to the mid price."""
    if closes is None:
        closes = [(h + l) / 2 for h, l in zip(highs, lows)]

    return [
        Candle(ts=start + step * i, open=c, high=h, low=l, close=c, volume=1000.0)
        for i, (h, l, c) in enumerate(zip(highs, lows, closes))
    ]


@pytest.fixture
def candle_factory():
    """Factory building candles from high/low (and optional close) series."""
    return build_candles


@pytest.fixture
def double_top_candles() -> List[Candle]:
    """
    20 candles with peaks at bars 5 and 11 and steadily rising lows.

    Highs sit at 1.1000 except 1.1050 and 1.1040 at the two peaks, so the
    tail also carries a flat resistance with rising support.
    """
    highs = [1.1000] * 20
    highs[5] = 1.1050
    highs[11] = 1.1040
    lows = [1.0900 + i * 0.0002 for i in range(20)]
    return build_candles(highs, lows)


@pytest.fixture
def head_and_shoulders_candles() -> List[Candle]:
    """25 candles with shoulders at bars 5 and 19 around a head at bar 12."""
    highs = [1.1000] * 25
    highs[5] = 1.1050
    highs[12] = 1.1100
    highs[19] = 1.1052
    lows = [1.0950] * 25
    return build_candles(highs, lows)


@pytest.fixture
def ascending_triangle_candles() -> List[Candle]:
    """15 candles with flat highs at 1.1000 and lows rising 5 pips per bar."""
    highs = [1.1000] * 15
    lows = [1.0900 + i * 0.0005 for i in range(15)]
    return build_candles(highs, lows)


@pytest.fixture
def sample_candle_row() -> Dict[str, Any]:
    """Raw candle payload row as delivered by a market-data feed."""
    return {
        "timestamp": int(datetime(2024, 1, 3, 12, 0, 0, tzinfo=timezone.utc).timestamp() * 1000),
        "open": 1.1000,
        "high": 1.1050,
        "low": 1.0990,
        "close": 1.1030,
        "volume": 1000.0,
    }


@pytest.fixture
def weekday_noon() -> datetime:
    """Wednesday 12:00 UTC, market open."""
    return datetime(2024, 1, 3, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def saturday_noon() -> datetime:
    """Saturday 12:00 UTC, market closed."""
    return datetime(2024, 1, 6, 12, 0, 0, tzinfo=timezone.utc)
