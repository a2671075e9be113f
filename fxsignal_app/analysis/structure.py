"""
Market structure analysis.

Swing highs and lows are extracted as structure points, then labelled
relative to the previous point of the same kind: higher high / lower high
for swing highs, higher low / lower low for swing lows. The labels of the
last few points decide the trend, and runs of three swings against that
trend are checked for head and shoulders reversals.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence

from ..config.defaults import StructureParams
from ..data.models import Candle
from ..instruments.specs import resolve_instrument_spec
from ..metrics.atr import calculate_atr
from .candlesticks import CandlestickPattern


class StructureLabel(str, Enum):
    HH = "HH"
    HL = "HL"
    LH = "LH"
    LL = "LL"


BULLISH_LABELS = (StructureLabel.HH, StructureLabel.HL)
BEARISH_LABELS = (StructureLabel.LL, StructureLabel.LH)


@dataclass(frozen=True)
class StructurePoint:
    is_high: bool               # swing high if True, swing low otherwise
    label: StructureLabel
    price: float
    timestamp: datetime
    index: int


@dataclass(frozen=True)
class MarketStructure:
    trend: str                  # 'bullish' | 'bearish' | 'neutral'
    structure_points: tuple[StructurePoint, ...] = ()
    current_high: float = 0.0
    current_low: float = 0.0
    last_break: Optional[str] = None    # 'upside' | 'downside'
    confidence: float = 0.0


def _is_swing(values: Sequence[float], i: int, compare) -> bool:
    return all(compare(values[i], values[j]) for j in (i - 2, i - 1, i + 1, i + 2))


def identify_structure_points(candles: Sequence[Candle], atr: float,
                              min_swing_atr: float = 0.5) -> list[StructurePoint]:
    """
    Extract swing highs and lows as structure points

    A swing high (low) is strictly above (below) the two candles on each
    side. A swing is kept only if it lies at least ``min_swing_atr * atr``
    away from the previously kept point.

    Args:
        candles: Candles in chronological order
        atr: Average True Range used to size the minimum swing
        min_swing_atr: Minimum distance between points in ATRs

    Returns:
        Structure points in chronological order, provisionally labelled
        HH for swing highs and LL for swing lows
    """
    min_distance = atr * min_swing_atr
    high_values = [c.high for c in candles]
    low_values = [c.low for c in candles]
    points: list[StructurePoint] = []

    def far_enough(price: float) -> bool:
        return not points or abs(price - points[-1].price) >= min_distance

    for i in range(2, len(candles) - 2):
        if _is_swing(high_values, i, lambda a, b: a > b) and far_enough(high_values[i]):
            points.append(StructurePoint(True, StructureLabel.HH, high_values[i], candles[i].ts, i))

        if _is_swing(low_values, i, lambda a, b: a < b) and far_enough(low_values[i]):
            points.append(StructurePoint(False, StructureLabel.LL, low_values[i], candles[i].ts, i))

    return points


def classify_structure_points(points: Sequence[StructurePoint]) -> list[StructurePoint]:
    """Label each point against the previous point of the same kind"""
    classified = []
    last_high: Optional[float] = None
    last_low: Optional[float] = None

    for point in points:
        if point.is_high:
            label = StructureLabel.HH if last_high is None or point.price > last_high else StructureLabel.LH
            last_high = point.price
        else:
            label = StructureLabel.LL if last_low is None or point.price < last_low else StructureLabel.HL
            last_low = point.price
        classified.append(replace(point, label=label))

    return classified


def determine_market_structure(points: Sequence[StructurePoint], current_price: float,
                               min_points: int = 4) -> MarketStructure:
    """
    Determine trend from labelled structure points

    Bullish when at least three of the last four points are HH/HL, bearish
    when at least three are LL/LH. Fewer than ``min_points`` points give a
    neutral structure.
    """
    if len(points) < min_points:
        return MarketStructure(trend="neutral", structure_points=tuple(points))

    classified = classify_structure_points(points)
    recent = classified[-4:]
    bullish = sum(1 for p in recent if p.label in BULLISH_LABELS)
    bearish = sum(1 for p in recent if p.label in BEARISH_LABELS)

    trend = "neutral"
    if bullish >= 3:
        trend = "bullish"
    elif bearish >= 3:
        trend = "bearish"

    swing_highs = [p.price for p in classified if p.is_high]
    swing_lows = [p.price for p in classified if not p.is_high]
    current_high = max(swing_highs) if swing_highs else 0.0
    current_low = min(swing_lows) if swing_lows else 0.0

    last_break = None
    if swing_highs and current_price > current_high:
        last_break = "upside"
    elif swing_lows and current_price < current_low:
        last_break = "downside"

    return MarketStructure(
        trend=trend,
        structure_points=tuple(classified),
        current_high=current_high,
        current_low=current_low,
        last_break=last_break,
    )


def analyze_market_structure(candles: Sequence[Candle],
                             params: Optional[StructureParams] = None,
                             min_candles: int = 50) -> MarketStructure:
    """
    Run the full structure pipeline on a candle series

    Confidence grows with the number of structure points, capped at 95.
    Fewer than ``min_candles`` candles give a neutral structure with zero
    confidence.
    """
    params = params or StructureParams()
    if len(candles) < min_candles:
        return MarketStructure(trend="neutral")

    atr = calculate_atr(candles, params.atr_period)
    if atr is None:
        return MarketStructure(trend="neutral")

    points = identify_structure_points(candles, atr, params.min_swing_atr)
    structure = determine_market_structure(points, candles[-1].close, params.min_points)
    return replace(structure, confidence=min(95.0, 60.0 + len(points) * 2))


class ReversalType(str, Enum):
    BEARISH_HS = "bearish_hs"
    BULLISH_INVERTED_HS = "bullish_inverted_hs"


@dataclass(frozen=True)
class StructureHeadAndShoulders:
    """Head and shoulders built from labelled structure points."""
    pattern_type: ReversalType
    left_shoulder: StructurePoint
    head: StructurePoint
    right_shoulder: StructurePoint
    neckline: float
    target: float
    is_confirmed: bool          # close beyond the neckline
    is_retest_setup: bool       # close within retest distance of the neckline

    @property
    def direction(self) -> str:
        return "bearish" if self.pattern_type is ReversalType.BEARISH_HS else "bullish"


def _extreme_between(candles: Sequence[Candle], start: int, end: int, use_high: bool) -> Optional[float]:
    window = candles[start:end + 1]
    if not window:
        return None
    if use_high:
        return max(c.high for c in window)
    return min(c.low for c in window)


def detect_structure_head_and_shoulders(candles: Sequence[Candle], trend: str,
                                        points: Sequence[StructurePoint], symbol: str,
                                        retest_pips: float = 10) -> Optional[StructureHeadAndShoulders]:
    """
    Find a head and shoulders reversal among structure points

    In a bullish structure, three consecutive swing highs with the middle
    one highest form a bearish pattern when the low between head and right
    shoulder undercuts the low between left shoulder and head. In a
    bearish structure the mirror image forms an inverted pattern. The
    neckline is the average of those two intervening extremes and the
    target projects the head-to-neckline distance beyond it.

    Args:
        candles: Candles the point indices refer to
        trend: Structure trend ('bullish' | 'bearish' | 'neutral')
        points: Structure points in chronological order
        symbol: Instrument symbol, sets the pip size for the retest check
        retest_pips: Max neckline distance for a retest setup

    Returns:
        The earliest matching pattern, or None
    """
    if len(points) < 3 or not candles or trend not in ("bullish", "bearish"):
        return None

    bearish = trend == "bullish"
    swings = [p for p in points if p.is_high == bearish]
    pip_size = resolve_instrument_spec(symbol).pip_size
    current_price = candles[-1].close

    for left, head, right in zip(swings, swings[1:], swings[2:]):
        if bearish and not (head.price > left.price and head.price > right.price):
            continue
        if not bearish and not (head.price < left.price and head.price < right.price):
            continue

        left_extreme = _extreme_between(candles, left.index, head.index, use_high=not bearish)
        right_extreme = _extreme_between(candles, head.index, right.index, use_high=not bearish)
        if left_extreme is None or right_extreme is None:
            continue

        if bearish and not right_extreme < left_extreme:
            continue
        if not bearish and not right_extreme > left_extreme:
            continue

        neckline = (left_extreme + right_extreme) / 2
        height = abs(head.price - neckline)

        return StructureHeadAndShoulders(
            pattern_type=ReversalType.BEARISH_HS if bearish else ReversalType.BULLISH_INVERTED_HS,
            left_shoulder=left,
            head=head,
            right_shoulder=right,
            neckline=neckline,
            target=neckline - height if bearish else neckline + height,
            is_confirmed=current_price < neckline if bearish else current_price > neckline,
            is_retest_setup=abs(current_price - neckline) / pip_size <= retest_pips,
        )

    return None


def is_retest_valid(pattern: StructureHeadAndShoulders,
                    candlestick_patterns: Sequence[CandlestickPattern],
                    min_confidence: float = 70) -> bool:
    """A retest setup confirmed by a candlestick pattern in the reversal direction."""
    if not pattern.is_retest_setup:
        return False
    return any(
        p.type == pattern.direction and p.confidence >= min_confidence
        for p in candlestick_patterns
    )
