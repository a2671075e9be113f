"""Market hours and trading session analysis"""

from .market_hours import (
    MarketSession,
    check_market_hours,
    get_last_market_close,
    get_session_name,
    is_data_stale,
    is_market_closed,
)
from .optimization import SessionAnalysis, analyze_trading_session, is_preferred_pair

__all__ = [
    "MarketSession",
    "SessionAnalysis",
    "analyze_trading_session",
    "check_market_hours",
    "get_last_market_close",
    "get_session_name",
    "is_data_stale",
    "is_market_closed",
    "is_preferred_pair",
]
