"""Pip, P&L and stop/target calculations driven by instrument specs"""

import math
from dataclasses import dataclass
from typing import Optional, Union

import structlog

from ..config.defaults import RiskParams
from ..data.models import SignalType
from .specs import resolve_instrument_spec

logger = structlog.get_logger(__name__)

SignalTypeLike = Union[SignalType, str]


@dataclass(frozen=True)
class SignalPerformance:
    """Performance of an open signal at a given price"""
    pips: int
    percentage: float
    is_profit: bool
    profit_loss: float

    @classmethod
    def zero(cls) -> "SignalPerformance":
        return cls(pips=0, percentage=0.0, is_profit=False, profit_loss=0.0)


def _is_finite(value: Optional[float]) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def _is_valid_price(price: Optional[float]) -> bool:
    return _is_finite(price) and price > 0


def round_pips(value: float) -> int:
    """
    Round a pip amount half away from zero.

    The value is first rounded to 9 decimals so float noise such as
    4.99999999999945 does not drop a whole pip. Non-finite values count
    as zero pips.
    """
    if not _is_finite(value):
        return 0
    value = round(value, 9)
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _directional_difference(entry_price: float, current_price: float, signal_type: SignalType) -> float:
    if signal_type is SignalType.BUY:
        return current_price - entry_price
    return entry_price - current_price


def calculate_pips(entry_price: float, current_price: float,
                   signal_type: SignalTypeLike, symbol: str) -> int:
    """
    Calculate signed pips gained by a signal

    Args:
        entry_price: Signal entry price
        current_price: Current market price
        signal_type: BUY or SELL
        symbol: Instrument symbol

    Returns:
        Pips, positive when the signal is in profit; 0 for degenerate prices
    """
    direction = SignalType.parse(signal_type)
    if not _is_valid_price(entry_price) or not _is_valid_price(current_price):
        logger.debug("Degenerate prices for pip calculation",
                     entry_price=entry_price, current_price=current_price, symbol=symbol)
        return 0
    spec = resolve_instrument_spec(symbol)
    return round_pips(_directional_difference(entry_price, current_price, direction) * spec.pip_multiplier)


def calculate_performance(entry_price: Optional[float], current_price: Optional[float],
                          signal_type: SignalTypeLike, symbol: str) -> SignalPerformance:
    """
    Calculate signal performance at the current price

    Degenerate prices (None, NaN, infinite, zero or negative) yield a
    zeroed result instead of propagating NaN or dividing by zero.

    Args:
        entry_price: Signal entry price
        current_price: Current market price
        signal_type: BUY or SELL
        symbol: Instrument symbol

    Returns:
        SignalPerformance
    """
    direction = SignalType.parse(signal_type)

    if not _is_valid_price(entry_price) or not _is_valid_price(current_price):
        logger.debug(
            "Degenerate prices for performance calculation",
            entry_price=entry_price,
            current_price=current_price,
            symbol=symbol,
        )
        return SignalPerformance.zero()

    spec = resolve_instrument_spec(symbol)
    profit_loss = _directional_difference(entry_price, current_price, direction)
    is_profit = profit_loss > 0
    percentage = abs(profit_loss / entry_price) * 100
    if not is_profit and percentage:
        percentage = -percentage

    return SignalPerformance(
        pips=round_pips(profit_loss * spec.pip_multiplier),
        percentage=percentage,
        is_profit=is_profit,
        profit_loss=profit_loss,
    )


def calculate_stop_loss(entry_price: float, symbol: str, signal_type: SignalTypeLike,
                        atr: Optional[float], params: Optional[RiskParams] = None) -> float:
    """
    Place a volatility-based stop loss with a minimum pip distance

    Args:
        entry_price: Signal entry price
        symbol: Instrument symbol
        signal_type: BUY or SELL
        atr: Average True Range of the instrument
        params: Risk parameters (ATR multiplier, minimum stop pips)

    Returns:
        Stop loss price, or 0.0 when the entry price is degenerate
    """
    params = params or RiskParams()
    direction = SignalType.parse(signal_type)
    if not _is_valid_price(entry_price):
        logger.debug("Degenerate entry price for stop loss", entry_price=entry_price, symbol=symbol)
        return 0.0
    spec = resolve_instrument_spec(symbol)

    atr_distance = atr * params.atr_multiplier if _is_finite(atr) and atr > 0 else 0.0
    stop_distance = max(atr_distance, params.min_stop_pips * spec.pip_size)

    if direction is SignalType.BUY:
        return entry_price - stop_distance
    return entry_price + stop_distance


def calculate_take_profit(entry_price: float, signal_type: SignalTypeLike, pip_distance: float,
                          symbol: str, params: Optional[RiskParams] = None) -> float:
    """
    Place a fixed-pip take profit with a minimum pip distance

    Args:
        entry_price: Signal entry price
        signal_type: BUY or SELL
        pip_distance: Requested distance in pips
        symbol: Instrument symbol
        params: Risk parameters (minimum take profit pips)

    Returns:
        Take profit price, or 0.0 when the entry price is degenerate
    """
    params = params or RiskParams()
    direction = SignalType.parse(signal_type)
    if not _is_valid_price(entry_price):
        logger.debug("Degenerate entry price for take profit", entry_price=entry_price, symbol=symbol)
        return 0.0
    spec = resolve_instrument_spec(symbol)

    requested = pip_distance if _is_finite(pip_distance) else 0
    price_distance = max(requested, params.min_take_profit_pips) * spec.pip_size

    if direction is SignalType.BUY:
        return entry_price + price_distance
    return entry_price - price_distance


def calculate_stop_loss_pips(entry_price: float, stop_loss: float, symbol: str) -> int:
    """Distance between entry and stop loss in pips, 0 for degenerate prices"""
    if not _is_valid_price(entry_price) or not _is_valid_price(stop_loss):
        return 0
    spec = resolve_instrument_spec(symbol)
    return round_pips(abs(entry_price - stop_loss) * spec.pip_multiplier)


def calculate_take_profit_pips(entry_price: float, take_profit: float, symbol: str) -> int:
    """Distance between entry and take profit in pips, 0 for degenerate prices"""
    if not _is_valid_price(entry_price) or not _is_valid_price(take_profit):
        return 0
    spec = resolve_instrument_spec(symbol)
    return round_pips(abs(take_profit - entry_price) * spec.pip_multiplier)


def format_price(price: float, symbol: str) -> str:
    """Format a price with the instrument's display decimals"""
    spec = resolve_instrument_spec(symbol)
    return f"{price:.{spec.display_decimals}f}"


@dataclass(frozen=True)
class RiskLevels:
    """Stop loss and take profit placed around an entry"""
    stop_loss: float
    take_profit: float
    stop_loss_pips: int
    take_profit_pips: int
    risk_reward: float


def calculate_risk_levels(entry_price: float, symbol: str, signal_type: SignalTypeLike,
                          atr: Optional[float], params: Optional[RiskParams] = None) -> RiskLevels:
    """
    Place stop loss and take profit for a signal

    The stop is volatility based (see ``calculate_stop_loss``); the target
    sits ``reward_ratio`` times the stop distance away, never closer than
    the minimum take profit.

    Args:
        entry_price: Signal entry price
        symbol: Instrument symbol
        signal_type: BUY or SELL
        atr: Average True Range, None when unavailable
        params: Risk parameters

    Returns:
        RiskLevels; all zero when the entry price is degenerate
    """
    params = params or RiskParams()
    stop_loss = calculate_stop_loss(entry_price, symbol, signal_type, atr, params)
    stop_pips = calculate_stop_loss_pips(entry_price, stop_loss, symbol)

    take_profit = calculate_take_profit(entry_price, signal_type, stop_pips * params.reward_ratio, symbol, params)
    target_pips = calculate_take_profit_pips(entry_price, take_profit, symbol)

    return RiskLevels(
        stop_loss=stop_loss,
        take_profit=take_profit,
        stop_loss_pips=stop_pips,
        take_profit_pips=target_pips,
        risk_reward=target_pips / stop_pips if stop_pips else 0.0,
    )
