"""Session quality analysis used to weight signals by trading session"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..instruments.specs import normalize_symbol
from ..utils.time import get_market_time

# Session windows in UTC minutes of the day, ends inclusive
LONDON_WINDOW = (7 * 60, 16 * 60)
NY_WINDOW = (12 * 60, 21 * 60)


@dataclass(frozen=True)
class SessionAnalysis:
    session: str                         # 'Asian' | 'London' | 'NY' | 'Overlap'
    is_optimal: bool
    volatility_multiplier: float
    preferred_pairs: tuple[str, ...] = ()
    bonus_score: int = 0


OVERLAP = SessionAnalysis(
    session="Overlap",
    is_optimal=True,
    volatility_multiplier=1.5,
    preferred_pairs=("EURUSD", "GBPUSD", "USDCHF", "EURGBP"),
    bonus_score=15,
)

LONDON = SessionAnalysis(
    session="London",
    is_optimal=True,
    volatility_multiplier=1.3,
    preferred_pairs=("EURUSD", "GBPUSD", "EURGBP", "EURJPY"),
    bonus_score=10,
)

NEW_YORK = SessionAnalysis(
    session="NY",
    is_optimal=True,
    volatility_multiplier=1.2,
    preferred_pairs=("EURUSD", "GBPUSD", "USDCAD", "USDJPY"),
    bonus_score=8,
)

ASIAN = SessionAnalysis(
    session="Asian",
    is_optimal=False,
    volatility_multiplier=0.8,
    preferred_pairs=("USDJPY", "AUDUSD", "NZDUSD", "EURJPY"),
    bonus_score=0,
)


def _within(minute: int, window: tuple[int, int]) -> bool:
    return window[0] <= minute <= window[1]


def analyze_trading_session(now: Optional[datetime] = None) -> SessionAnalysis:
    """
    Classify ``now`` into a trading session.

    The London/New York overlap is checked first, then London, then
    New York; anything else is the Asian session.
    """
    now = get_market_time(now)
    minute = now.hour * 60 + now.minute

    if _within(minute, (NY_WINDOW[0], LONDON_WINDOW[1])):
        return OVERLAP
    if _within(minute, LONDON_WINDOW):
        return LONDON
    if _within(minute, NY_WINDOW):
        return NEW_YORK
    return ASIAN


def is_preferred_pair(symbol: str, session: SessionAnalysis) -> bool:
    """Whether ``symbol`` is among the session's most liquid pairs."""
    return normalize_symbol(symbol) in session.preferred_pairs
