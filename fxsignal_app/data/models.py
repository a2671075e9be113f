"""
Canonical data models for normalized price data.

This module defines immutable data structures that represent clean, validated
candles after normalization from raw market-data payloads.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Sequence


@dataclass(frozen=True)
class Candle:
    """Normalized OHLCV candle with a UTC timestamp."""
    ts: datetime        # UTC market timestamp
    open: float        # Opening price
    high: float        # High price
    low: float         # Low price
    close: float       # Closing price
    volume: float = 0.0


class SignalType(str, Enum):
    """Direction of a trading signal."""
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def parse(cls, value: "SignalType | str") -> "SignalType":
        """Accept an enum member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown signal type: {value!r}") from None


def highs(candles: Sequence[Candle]) -> list[float]:
    return [c.high for c in candles]


def lows(candles: Sequence[Candle]) -> list[float]:
    return [c.low for c in candles]


def closes(candles: Sequence[Candle]) -> list[float]:
    return [c.close for c in candles]
