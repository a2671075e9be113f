"""Candle structure analysis and candlestick pattern detection"""

from dataclasses import asdict, dataclass
from typing import Callable, Optional, Sequence

from ..data.models import Candle


@dataclass(frozen=True)
class CandleStructure:
    """Candle structure analysis results"""
    range_value: float
    body: float
    upper_shadow: float
    lower_shadow: float
    body_pct: float
    upper_pct: float
    lower_pct: float
    is_bull: bool
    is_bear: bool
    is_doji: bool


@dataclass(frozen=True)
class CandlestickPattern:
    """A detected candlestick pattern"""
    pattern: str
    type: str              # 'bullish' | 'bearish' | 'neutral'
    confidence: float
    description: str
    reliability: str       # 'high' | 'medium' | 'low'

    def to_dict(self) -> dict:
        return asdict(self)


def analyze_candle_structure(candle: Candle, doji_threshold: float = 0.1) -> CandleStructure:
    """
    Analyze candle structure components

    Args:
        candle: Candle to analyze
        doji_threshold: Body share of the range below which the candle is a doji

    Returns:
        CandleStructure with all analysis components
    """
    range_value = candle.high - candle.low
    body = abs(candle.close - candle.open)
    upper_shadow = candle.high - max(candle.open, candle.close)
    lower_shadow = min(candle.open, candle.close) - candle.low

    # Calculate percentages (handle zero range)
    if range_value > 0:
        body_pct = body / range_value
        upper_pct = upper_shadow / range_value
        lower_pct = lower_shadow / range_value
    else:
        body_pct = 0.0
        upper_pct = 0.0
        lower_pct = 0.0

    return CandleStructure(
        range_value=range_value,
        body=body,
        upper_shadow=upper_shadow,
        lower_shadow=lower_shadow,
        body_pct=body_pct,
        upper_pct=upper_pct,
        lower_pct=lower_pct,
        is_bull=candle.close > candle.open,
        is_bear=candle.close < candle.open,
        is_doji=range_value > 0 and body_pct < doji_threshold,
    )


# Single-candle patterns. Zero-range candles never match.

def detect_doji(candle: Candle) -> Optional[CandlestickPattern]:
    structure = analyze_candle_structure(candle)
    if not structure.is_doji:
        return None
    return CandlestickPattern(
        pattern="Doji",
        type="neutral",
        confidence=70,
        description="Indecision pattern - potential reversal",
        reliability="medium",
    )


def detect_hammer(candle: Candle) -> Optional[CandlestickPattern]:
    s = analyze_candle_structure(candle)
    if s.range_value <= 0 or not (s.lower_shadow > s.body * 2 and s.upper_shadow < s.body * 0.5):
        return None
    return CandlestickPattern(
        pattern="Hammer",
        type="bullish",
        confidence=75,
        description="Bullish reversal pattern at support",
        reliability="high",
    )


def detect_shooting_star(candle: Candle) -> Optional[CandlestickPattern]:
    s = analyze_candle_structure(candle)
    if s.range_value <= 0 or not (s.upper_shadow > s.body * 2 and s.lower_shadow < s.body * 0.5):
        return None
    return CandlestickPattern(
        pattern="Shooting Star",
        type="bearish",
        confidence=75,
        description="Bearish reversal pattern at resistance",
        reliability="high",
    )


def detect_marubozu(candle: Candle) -> Optional[CandlestickPattern]:
    s = analyze_candle_structure(candle)
    if s.range_value <= 0 or s.body_pct <= 0.95:
        return None
    direction = "bullish" if s.is_bull else "bearish"
    return CandlestickPattern(
        pattern="Marubozu",
        type=direction,
        confidence=80,
        description=f"Strong {direction} momentum",
        reliability="high",
    )


def detect_spinning_top(candle: Candle) -> Optional[CandlestickPattern]:
    s = analyze_candle_structure(candle)
    if s.range_value <= 0 or not (s.upper_shadow > s.body and s.lower_shadow > s.body):
        return None
    return CandlestickPattern(
        pattern="Spinning Top",
        type="neutral",
        confidence=60,
        description="Indecision - potential reversal",
        reliability="medium",
    )


# Multi-candle patterns, evaluated on the tail of the series

def detect_engulfing(candles: Sequence[Candle]) -> Optional[CandlestickPattern]:
    if len(candles) < 2:
        return None

    prev, current = candles[-2], candles[-1]
    prev_bullish = prev.close > prev.open
    current_bullish = current.close > current.open

    if not prev_bullish and current_bullish and current.open < prev.close and current.close > prev.open:
        return CandlestickPattern(
            pattern="Bullish Engulfing",
            type="bullish",
            confidence=85,
            description="Strong bullish reversal pattern",
            reliability="high",
        )

    if prev_bullish and not current_bullish and current.open > prev.close and current.close < prev.open:
        return CandlestickPattern(
            pattern="Bearish Engulfing",
            type="bearish",
            confidence=85,
            description="Strong bearish reversal pattern",
            reliability="high",
        )

    return None


def detect_harami(candles: Sequence[Candle]) -> Optional[CandlestickPattern]:
    if len(candles) < 2:
        return None

    prev, current = candles[-2], candles[-1]
    prev_body = abs(prev.close - prev.open)
    current_body = abs(current.close - current.open)

    inside = (current.high < max(prev.open, prev.close) and
              current.low > min(prev.open, prev.close))
    if not (current_body < prev_body * 0.5 and inside):
        return None

    prev_bullish = prev.close > prev.open
    return CandlestickPattern(
        pattern="Bearish Harami" if prev_bullish else "Bullish Harami",
        type="bearish" if prev_bullish else "bullish",
        confidence=70,
        description="Potential reversal pattern",
        reliability="medium",
    )


def detect_morning_star(candles: Sequence[Candle]) -> Optional[CandlestickPattern]:
    if len(candles) < 3:
        return None

    first, middle, last = candles[-3:]
    middle_small = abs(middle.close - middle.open) < abs(first.close - first.open) * 0.3

    if (first.close < first.open and last.close > last.open and middle_small and
            middle.high < first.close and last.close > (first.open + first.close) / 2):
        return CandlestickPattern(
            pattern="Morning Star",
            type="bullish",
            confidence=90,
            description="Very strong bullish reversal pattern",
            reliability="high",
        )
    return None


def detect_evening_star(candles: Sequence[Candle]) -> Optional[CandlestickPattern]:
    if len(candles) < 3:
        return None

    first, middle, last = candles[-3:]
    middle_small = abs(middle.close - middle.open) < abs(first.close - first.open) * 0.3

    if (first.close > first.open and last.close < last.open and middle_small and
            middle.low > first.close and last.close < (first.open + first.close) / 2):
        return CandlestickPattern(
            pattern="Evening Star",
            type="bearish",
            confidence=90,
            description="Very strong bearish reversal pattern",
            reliability="high",
        )
    return None


def detect_three_white_soldiers(candles: Sequence[Candle]) -> Optional[CandlestickPattern]:
    if len(candles) < 3:
        return None

    a, b, c = candles[-3:]
    if all(x.close > x.open for x in (a, b, c)) and a.close < b.close < c.close:
        return CandlestickPattern(
            pattern="Three White Soldiers",
            type="bullish",
            confidence=85,
            description="Strong bullish continuation pattern",
            reliability="high",
        )
    return None


def detect_three_black_crows(candles: Sequence[Candle]) -> Optional[CandlestickPattern]:
    if len(candles) < 3:
        return None

    a, b, c = candles[-3:]
    if all(x.close < x.open for x in (a, b, c)) and a.close > b.close > c.close:
        return CandlestickPattern(
            pattern="Three Black Crows",
            type="bearish",
            confidence=85,
            description="Strong bearish continuation pattern",
            reliability="high",
        )
    return None


SINGLE_CANDLE_DETECTORS: tuple[Callable[[Candle], Optional[CandlestickPattern]], ...] = (
    detect_doji,
    detect_hammer,
    detect_shooting_star,
    detect_marubozu,
    detect_spinning_top,
)

MULTI_CANDLE_DETECTORS: tuple[Callable[[Sequence[Candle]], Optional[CandlestickPattern]], ...] = (
    detect_engulfing,
    detect_harami,
    detect_morning_star,
    detect_evening_star,
    detect_three_white_soldiers,
    detect_three_black_crows,
)


def detect_candlestick_patterns(candles: Sequence[Candle], lookback: int = 5) -> list[CandlestickPattern]:
    """
    Detect candlestick patterns on the tail of a series

    Single-candle patterns are checked on each of the last ``lookback``
    candles; multi-candle patterns on the final two or three.

    Args:
        candles: Candles in chronological order
        lookback: Number of trailing candles checked for single-candle patterns

    Returns:
        Detected patterns in detection order; empty for fewer than 3 candles
    """
    if len(candles) < 3:
        return []

    patterns = []
    for candle in candles[-lookback:]:
        for detect in SINGLE_CANDLE_DETECTORS:
            pattern = detect(candle)
            if pattern is not None:
                patterns.append(pattern)

    for detect_multi in MULTI_CANDLE_DETECTORS:
        pattern = detect_multi(candles)
        if pattern is not None:
            patterns.append(pattern)

    return patterns
