"""Volatility metrics used by structure, regime and risk calculations"""

from .atr import calculate_atr, calculate_natr, calculate_true_range

__all__ = [
    "calculate_atr",
    "calculate_natr",
    "calculate_true_range",
]
