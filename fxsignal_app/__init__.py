"""
FX Signal App - Pattern and Structure Scoring Library

Pure scoring functions for forex signals: chart and candlestick pattern
detection over OHLC candles, instrument-aware pip and P&L calculation,
and forex market-session calculation.
"""

__version__ = "0.1.0"
__author__ = "FX Signal Team"
