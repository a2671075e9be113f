"""
Chart pattern classification over candle series.

Each detector is a pure function of a candle list and returns a
``ChartPattern`` or ``None``. Too few candles is not an error: the detector
simply reports no pattern. Prices are read from the trailing window of
the series only; indices returned by the extrema finder are relative to
that window.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional, Sequence

from ..config.defaults import (
    DefaultConfig,
    DoublePatternParams,
    HeadShouldersParams,
    TriangleParams,
    get_default_config,
)
from ..data.models import Candle, highs, lows
from ..logging.config import get_pattern_logger, log_pattern_detection
from ..monitoring.collector import MetricsCollector
from .extrema import find_peaks, find_troughs


class PatternType(str, Enum):
    DOUBLE_TOP = "Double Top"
    DOUBLE_BOTTOM = "Double Bottom"
    HEAD_AND_SHOULDERS = "Head and Shoulders"
    ASCENDING_TRIANGLE = "Ascending Triangle"

    @property
    def direction(self) -> str:
        if self in (PatternType.DOUBLE_TOP, PatternType.HEAD_AND_SHOULDERS):
            return "bearish"
        return "bullish"

    @property
    def reliability(self) -> str:
        return "medium" if self is PatternType.ASCENDING_TRIANGLE else "high"


@dataclass(frozen=True)
class ChartPattern:
    """A detected chart pattern."""
    type: PatternType
    confidence: float                   # 0 - 100
    description: str
    support: Optional[float] = None
    resistance: Optional[float] = None
    target: Optional[float] = None

    @property
    def direction(self) -> str:
        return self.type.direction

    @property
    def reliability(self) -> str:
        return self.type.reliability

    def to_dict(self) -> dict:
        data = {k: v for k, v in asdict(self).items() if v is not None}
        data["type"] = self.type.value
        data["direction"] = self.direction
        return data


def detect_double_top(candles: Sequence[Candle],
                      params: Optional[DoublePatternParams] = None) -> Optional[ChartPattern]:
    """
    Detect a double top in the trailing window of highs.

    The last two peaks must be within ``max_price_diff`` of each other and
    more than ``min_separation`` bars apart.
    """
    params = params or DoublePatternParams()
    if len(candles) < params.min_candles:
        return None

    window = highs(candles)[-params.window:]
    peaks = find_peaks(window, params.min_distance)
    if len(peaks) < 2:
        return None

    first, second = peaks[-2:]
    first_price, second_price = window[first], window[second]
    if first_price <= 0:
        return None

    price_diff = abs(first_price - second_price) / first_price
    if price_diff >= params.max_price_diff or second - first <= params.min_separation:
        return None

    resistance = max(first_price, second_price)
    current_price = candles[-1].close

    return ChartPattern(
        type=PatternType.DOUBLE_TOP,
        confidence=params.base_confidence + params.confidence_range * (1 - price_diff),
        resistance=resistance,
        target=current_price - (resistance - current_price) * params.retracement,
        description=f"Bearish double top pattern detected at {resistance:.5f}",
    )


def detect_double_bottom(candles: Sequence[Candle],
                         params: Optional[DoublePatternParams] = None) -> Optional[ChartPattern]:
    """
    Detect a double bottom in the trailing window of lows.

    Mirror of ``detect_double_top`` using troughs.
    """
    params = params or DoublePatternParams()
    if len(candles) < params.min_candles:
        return None

    window = lows(candles)[-params.window:]
    troughs = find_troughs(window, params.min_distance)
    if len(troughs) < 2:
        return None

    first, second = troughs[-2:]
    first_price, second_price = window[first], window[second]
    if first_price <= 0:
        return None

    price_diff = abs(first_price - second_price) / first_price
    if price_diff >= params.max_price_diff or second - first <= params.min_separation:
        return None

    support = min(first_price, second_price)
    current_price = candles[-1].close

    return ChartPattern(
        type=PatternType.DOUBLE_BOTTOM,
        confidence=params.base_confidence + params.confidence_range * (1 - price_diff),
        support=support,
        target=current_price + (current_price - support) * params.retracement,
        description=f"Bullish double bottom pattern detected at {support:.5f}",
    )


def detect_head_and_shoulders(candles: Sequence[Candle],
                              params: Optional[HeadShouldersParams] = None) -> Optional[ChartPattern]:
    """
    Detect a head and shoulders top.

    The last three peaks are read as left shoulder, head and right
    shoulder. The head must exceed both shoulders and the shoulders must
    be within ``max_shoulder_diff`` of each other. The neckline is the
    average shoulder height and the target projects the head height below
    it.
    """
    params = params or HeadShouldersParams()
    if len(candles) < params.min_candles:
        return None

    window = highs(candles)[-params.window:]
    peaks = find_peaks(window, params.min_distance)
    if len(peaks) < 3:
        return None

    left, head, right = (window[i] for i in peaks[-3:])
    if left <= 0:
        return None

    shoulder_diff = abs(left - right) / left
    if not (head > left and head > right and shoulder_diff < params.max_shoulder_diff):
        return None

    neckline = (left + right) / 2

    return ChartPattern(
        type=PatternType.HEAD_AND_SHOULDERS,
        confidence=params.base_confidence + params.confidence_range * (1 - shoulder_diff),
        resistance=head,
        support=neckline,
        target=neckline - (head - neckline),
        description=f"Bearish head and shoulders pattern with neckline at {neckline:.5f}",
    )


def detect_ascending_triangle(candles: Sequence[Candle],
                              params: Optional[TriangleParams] = None) -> Optional[ChartPattern]:
    """
    Detect an ascending triangle.

    Requires horizontal resistance (at least ``min_touches`` highs within
    ``resistance_tolerance`` of the window maximum) and rising support (the
    later lows average above the earlier lows). The middle bar of the
    window belongs to neither half.
    """
    params = params or TriangleParams()
    if len(candles) < params.min_candles:
        return None

    recent_highs = highs(candles)[-params.window:]
    recent_lows = lows(candles)[-params.window:]

    max_high = max(recent_highs)
    if max_high <= 0:
        return None

    touches = sum(1 for h in recent_highs if abs(h - max_high) / max_high < params.resistance_tolerance)

    half = len(recent_lows) // 2
    first_half = recent_lows[:half]
    second_half = recent_lows[half + 1:] if len(recent_lows) % 2 else recent_lows[half:]
    if not first_half or not second_half:
        return None

    avg_first = sum(first_half) / len(first_half)
    avg_second = sum(second_half) / len(second_half)

    if touches < params.min_touches or avg_second <= avg_first:
        return None

    return ChartPattern(
        type=PatternType.ASCENDING_TRIANGLE,
        confidence=params.confidence,
        resistance=max_high,
        support=avg_second,
        target=max_high + (max_high - avg_second) * params.target_ratio,
        description=f"Bullish ascending triangle with resistance at {max_high:.5f}",
    )


def detect_all_patterns(candles: Sequence[Candle],
                        config: Optional[DefaultConfig] = None) -> list[ChartPattern]:
    """
    Run every detector and return the hits sorted by confidence, highest first.
    """
    config = config or get_default_config()

    results = [
        detect_double_top(candles, config.double_pattern),
        detect_double_bottom(candles, config.double_pattern),
        detect_head_and_shoulders(candles, config.head_shoulders),
        detect_ascending_triangle(candles, config.triangle),
    ]

    patterns = [p for p in results if p is not None]
    return sorted(patterns, key=lambda p: p.confidence, reverse=True)


class PatternRecognizer:
    """
    Chart pattern detection bound to a configuration and metrics collector.
    """

    def __init__(self, config: Optional[DefaultConfig] = None,
                 collector: Optional[MetricsCollector] = None):
        self.config = config or get_default_config()
        self.collector = collector
        self.logger = get_pattern_logger(__name__)

    def detect_double_top(self, candles: Sequence[Candle]) -> Optional[ChartPattern]:
        return detect_double_top(candles, self.config.double_pattern)

    def detect_double_bottom(self, candles: Sequence[Candle]) -> Optional[ChartPattern]:
        return detect_double_bottom(candles, self.config.double_pattern)

    def detect_head_and_shoulders(self, candles: Sequence[Candle]) -> Optional[ChartPattern]:
        return detect_head_and_shoulders(candles, self.config.head_shoulders)

    def detect_ascending_triangle(self, candles: Sequence[Candle]) -> Optional[ChartPattern]:
        return detect_ascending_triangle(candles, self.config.triangle)

    def detect_all(self, candles: Sequence[Candle], symbol: str = "") -> list[ChartPattern]:
        """
        Detect all chart patterns, logging and counting each hit.

        Args:
            candles: Candles in chronological order
            symbol: Instrument symbol used for log context

        Returns:
            Patterns sorted by confidence, highest first
        """
        if self.collector is None:
            patterns = detect_all_patterns(candles, self.config)
        else:
            with self.collector.time("patterns.detect_all"):
                patterns = detect_all_patterns(candles, self.config)
            for pattern in patterns:
                self.collector.increment(f"patterns.{pattern.type.name.lower()}")

        for pattern in patterns:
            log_pattern_detection(self.logger, symbol, pattern, context={"candles": len(candles)})

        return patterns
