"""Market regime classification from recent closes and volatility"""

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class MarketRegime:
    regime: str            # 'trending' | 'ranging' | 'volatile' | 'breakout'
    strength: float
    direction: str         # 'bullish' | 'bearish' | 'neutral'
    confidence: float


NEUTRAL_REGIME = MarketRegime(regime="ranging", strength=0.5, direction="neutral", confidence=0.3)


def regression_slope(values: Sequence[float]) -> float:
    """Least-squares slope of ``values`` against their index"""
    n = len(values)
    if n < 2:
        return 0.0

    sum_x = n * (n - 1) / 2
    sum_y = sum(values)
    sum_xy = sum(i * v for i, v in enumerate(values))
    sum_x2 = sum(i * i for i in range(n))

    denominator = n * sum_x2 - sum_x * sum_x
    return (n * sum_xy - sum_x * sum_y) / denominator


def _direction(slope: float) -> str:
    if slope > 0:
        return "bullish"
    if slope < 0:
        return "bearish"
    return "neutral"


def detect_market_regime(prices: Sequence[float], atr: float, current_price: float) -> MarketRegime:
    """
    Classify the market regime of the last 20 prices

    Checks run in order: volatile (ATR above 2.5% of price), trending
    (steep slope over a range wider than 1.5%), breakout (range above 2%
    with a net move above 1%), otherwise ranging.

    Args:
        prices: Closes in chronological order
        atr: Average True Range
        current_price: Latest price

    Returns:
        MarketRegime; the neutral ranging regime for short series or
        non-positive prices
    """
    if len(prices) < 20 or current_price <= 0:
        return NEUTRAL_REGIME

    recent = list(prices[-20:])
    short_term = list(prices[-10:])

    slope = regression_slope(recent)
    slope_strength = abs(slope) / current_price
    volatility_ratio = atr / current_price
    price_range = (max(recent) - min(recent)) / current_price

    if volatility_ratio > 0.025:
        return MarketRegime(
            regime="volatile",
            strength=volatility_ratio * 10,
            direction=_direction(slope),
            confidence=min(0.9, volatility_ratio * 20),
        )

    if slope_strength > 0.002 and price_range > 0.015:
        return MarketRegime(
            regime="trending",
            strength=slope_strength * 100,
            direction=_direction(slope),
            confidence=min(0.95, slope_strength * 200),
        )

    net_move = abs(recent[0] - recent[-1]) / current_price
    if price_range > 0.02 and net_move > 0.01:
        return MarketRegime(
            regime="breakout",
            strength=price_range * 10,
            direction="bullish" if short_term[-1] > short_term[0] else "bearish",
            confidence=min(0.85, price_range * 15),
        )

    return MarketRegime(
        regime="ranging",
        strength=1 - slope_strength * 100,
        direction="neutral",
        confidence=max(0.4, 1 - price_range * 10),
    )
