"""Instrument specifications and pip/performance calculations"""

from .pips import (
    RiskLevels,
    SignalPerformance,
    calculate_performance,
    calculate_pips,
    calculate_risk_levels,
    calculate_stop_loss,
    calculate_stop_loss_pips,
    calculate_take_profit,
    calculate_take_profit_pips,
    format_price,
)
from .specs import InstrumentCategory, InstrumentSpec, normalize_symbol, resolve_instrument_spec

__all__ = [
    "InstrumentCategory",
    "InstrumentSpec",
    "RiskLevels",
    "SignalPerformance",
    "calculate_performance",
    "calculate_pips",
    "calculate_risk_levels",
    "calculate_stop_loss",
    "calculate_stop_loss_pips",
    "calculate_take_profit",
    "calculate_take_profit_pips",
    "format_price",
    "normalize_symbol",
    "resolve_instrument_spec",
]
