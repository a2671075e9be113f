"""ATR (Average True Range) and NATR (Normalized ATR) calculations"""

from typing import Optional, Sequence

from ..data.models import Candle


def calculate_true_range(current: Candle, previous: Optional[Candle] = None) -> float:
    """
    Calculate True Range for a single candle

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))

    Args:
        current: Current candle
        previous: Previous candle (None for first candle)

    Returns:
        True Range value
    """
    if previous is None:
        return current.high - current.low

    range_hl = current.high - current.low
    range_hc = abs(current.high - previous.close)
    range_lc = abs(current.low - previous.close)

    return max(range_hl, range_hc, range_lc)


def calculate_atr(candles: Sequence[Candle], period: int = 14) -> Optional[float]:
    """
    Calculate Average True Range using Simple Moving Average

    Args:
        candles: Candles in chronological order
        period: ATR period (default 14)

    Returns:
        ATR value or None if insufficient data
    """
    if period <= 0 or len(candles) < period:
        return None

    # Only the trailing period (plus one candle for the previous close) matters
    start = len(candles) - period
    true_ranges = [
        calculate_true_range(candles[i], candles[i - 1] if i > 0 else None)
        for i in range(start, len(candles))
    ]

    return sum(true_ranges) / len(true_ranges)


def calculate_natr(atr: float, current_price: float) -> float:
    """
    Calculate Normalized Average True Range

    NATR = 100 * ATR / current_price

    Args:
        atr: ATR value
        current_price: Current close price

    Returns:
        NATR percentage value
    """
    if current_price <= 0:
        return 0.0

    return 100.0 * atr / current_price
