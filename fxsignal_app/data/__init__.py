"""
Data models and payload normalization.

Immutable candle records plus the boundary that maps raw market-data rows
onto them.
"""
