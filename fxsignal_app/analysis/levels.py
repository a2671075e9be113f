"""Support/resistance levels, trend direction and price action signals"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from ..config.defaults import KeyLevelParams
from ..data.models import Candle, closes, highs, lows
from .candlesticks import CandlestickPattern
from .extrema import find_peaks, find_troughs
from .patterns import ChartPattern


class Trend(str, Enum):
    UPTREND = "uptrend"
    DOWNTREND = "downtrend"
    SIDEWAYS = "sideways"


@dataclass(frozen=True)
class KeyLevels:
    """Grouped swing levels, ascending"""
    support_levels: tuple[float, ...] = ()
    resistance_levels: tuple[float, ...] = ()


@dataclass(frozen=True)
class PriceActionSignal:
    signal: str            # 'bullish' | 'bearish' | 'neutral'
    strength: float
    description: str


def group_levels(levels: Sequence[float], tolerance: float = 0.001) -> list[float]:
    """
    Merge nearby price levels

    Levels are sorted; each one within ``tolerance`` (relative) of its
    predecessor joins the current group. Each group is replaced by its
    average.
    """
    if not levels:
        return []

    ordered = sorted(levels)
    grouped = []
    current = [ordered[0]]

    for prev, level in zip(ordered, ordered[1:]):
        if prev != 0 and abs(level - prev) / abs(prev) < tolerance:
            current.append(level)
        else:
            grouped.append(sum(current) / len(current))
            current = [level]

    grouped.append(sum(current) / len(current))
    return grouped


def find_key_levels(candles: Sequence[Candle], params: Optional[KeyLevelParams] = None) -> KeyLevels:
    """
    Find grouped support and resistance levels from swing points

    Args:
        candles: Candles in chronological order
        params: Swing window, grouping tolerance and level cap

    Returns:
        KeyLevels with at most ``max_levels`` of each, lowest first
    """
    params = params or KeyLevelParams()
    if len(candles) < params.min_candles:
        return KeyLevels()

    high_values = highs(candles)
    low_values = lows(candles)

    swing_highs = [high_values[i] for i in find_peaks(high_values, params.swing_window)]
    swing_lows = [low_values[i] for i in find_troughs(low_values, params.swing_window)]

    return KeyLevels(
        support_levels=tuple(group_levels(swing_lows, params.group_tolerance)[:params.max_levels]),
        resistance_levels=tuple(group_levels(swing_highs, params.group_tolerance)[:params.max_levels]),
    )


def _sma(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def determine_trend(candles: Sequence[Candle]) -> Trend:
    """Classify trend from SMA5 / SMA10 / SMA20 alignment of closes"""
    if len(candles) < 20:
        return Trend.SIDEWAYS

    recent = closes(candles)[-20:]
    sma5, sma10, sma20 = _sma(recent[-5:]), _sma(recent[-10:]), _sma(recent)

    if sma5 > sma10 > sma20:
        return Trend.UPTREND
    if sma5 < sma10 < sma20:
        return Trend.DOWNTREND
    return Trend.SIDEWAYS


def detect_price_action(candles: Sequence[Candle]) -> PriceActionSignal:
    """
    Detect breakouts and consolidation in the last 10 candles

    The final close is compared with the extremes of the nine candles
    before it.
    """
    if len(candles) < 10:
        return PriceActionSignal("neutral", 0, "Insufficient data")

    recent = candles[-10:]
    current_price = recent[-1].close
    highest_high = max(c.high for c in recent[:-1])
    lowest_low = min(c.low for c in recent[:-1])

    if current_price > highest_high:
        return PriceActionSignal("bullish", 75, "Bullish breakout above recent highs")

    if current_price < lowest_low:
        return PriceActionSignal("bearish", 75, "Bearish breakdown below recent lows")

    if current_price > 0:
        price_range = (max(c.high for c in recent) - min(c.low for c in recent)) / current_price
        if price_range < 0.01:
            return PriceActionSignal("neutral", 50, "Price consolidating in tight range")

    return PriceActionSignal("neutral", 30, "No clear price action signal")


_CHART_WEIGHTS = {"high": 1.5, "medium": 1.0, "low": 0.5}
_CANDLE_WEIGHTS = {"high": 1.2, "medium": 0.8, "low": 0.4}


def calculate_pattern_strength(chart_patterns: Sequence[ChartPattern],
                               candlestick_patterns: Sequence[CandlestickPattern]) -> float:
    """
    Reliability-weighted average confidence of all detected patterns (0-100)

    Chart patterns weigh more than candlestick patterns of the same
    reliability.
    """
    total = 0.0
    weight_sum = 0.0

    for pattern in chart_patterns:
        weight = _CHART_WEIGHTS.get(pattern.reliability, 1.0)
        total += pattern.confidence / 100 * weight
        weight_sum += weight

    for candle_pattern in candlestick_patterns:
        weight = _CANDLE_WEIGHTS.get(candle_pattern.reliability, 0.8)
        total += candle_pattern.confidence / 100 * weight
        weight_sum += weight

    if weight_sum == 0:
        return 0.0
    return min(100.0, total / weight_sum * 100)
