"""
Instrument specifications derived from symbol strings.

Resolution is pure and total: every symbol, including unknown or empty
ones, maps to a spec. Classification order is metals, index allow-list,
crypto prefixes, forex pairs, then a forex-like fallback.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional

_NON_ALNUM = re.compile(r"[^A-Z0-9]")
_CURRENCY = re.compile(r"^[A-Z]{3}$")

INDEX_SYMBOLS = frozenset({
    "US30", "DJI", "DJ30", "GER40", "DE40", "DAX",
    "SPX500", "US500", "SP500", "NAS100", "US100", "NDX",
})

CRYPTO_PREFIXES = ("BTC", "ETH")


class InstrumentCategory(str, Enum):
    FOREX = "forex"
    METAL = "metal"
    INDEX = "index"
    CRYPTO = "crypto"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class InstrumentSpec:
    """Pricing conventions for a single instrument."""
    category: InstrumentCategory
    symbol: str
    pip_size: float               # Price change per pip
    pip_multiplier: float         # pips = price_diff * pip_multiplier
    display_decimals: int         # Decimals used when formatting prices
    contract_size: float          # Standard lot contract size
    base_currency: Optional[str] = None
    quote_currency: Optional[str] = None


def normalize_symbol(symbol: Optional[str]) -> str:
    """Upper-case a symbol and drop separators such as '/', '-' or '_'."""
    return _NON_ALNUM.sub("", (symbol or "").upper())


def parse_forex_parts(symbol: Optional[str]) -> Optional[tuple[str, str]]:
    """
    Split a symbol into base and quote currency codes.

    Returns:
        (base, quote) if the first and last three characters are letters,
        None otherwise
    """
    normalized = normalize_symbol(symbol)
    if len(normalized) < 6:
        return None

    base, quote = normalized[:3], normalized[-3:]
    if not _CURRENCY.match(base) or not _CURRENCY.match(quote):
        return None
    return base, quote


def _metal_spec(symbol: str, base: str, pip_size: float, pip_multiplier: float,
                display_decimals: int, contract_size: float) -> InstrumentSpec:
    return InstrumentSpec(
        category=InstrumentCategory.METAL,
        symbol=symbol,
        pip_size=pip_size,
        pip_multiplier=pip_multiplier,
        display_decimals=display_decimals,
        contract_size=contract_size,
        base_currency=base,
        quote_currency=symbol[-3:] if len(symbol) > 3 else "USD",
    )


@lru_cache(maxsize=512)
def _resolve(symbol: str) -> InstrumentSpec:
    if symbol.startswith("XAU"):
        # 100 oz per lot
        return _metal_spec(symbol, "XAU", 0.1, 10, 2, 100)
    if symbol.startswith("XAG"):
        # 5,000 oz per lot
        return _metal_spec(symbol, "XAG", 0.01, 100, 3, 5000)

    if symbol in INDEX_SYMBOLS:
        return InstrumentSpec(
            category=InstrumentCategory.INDEX,
            symbol=symbol,
            pip_size=1,
            pip_multiplier=1,
            display_decimals=0,
            contract_size=1,
        )

    if symbol.startswith(CRYPTO_PREFIXES):
        return InstrumentSpec(
            category=InstrumentCategory.CRYPTO,
            symbol=symbol,
            pip_size=1,
            pip_multiplier=1,
            display_decimals=2,
            contract_size=1,
        )

    parts = parse_forex_parts(symbol)
    if parts is not None:
        base, quote = parts
        is_jpy = "JPY" in (base, quote)
        return InstrumentSpec(
            category=InstrumentCategory.FOREX,
            symbol=symbol,
            pip_size=0.01 if is_jpy else 0.0001,
            pip_multiplier=100 if is_jpy else 10000,
            display_decimals=3 if is_jpy else 5,
            contract_size=100000,
            base_currency=base,
            quote_currency=quote,
        )

    return InstrumentSpec(
        category=InstrumentCategory.UNKNOWN,
        symbol=symbol,
        pip_size=0.0001,
        pip_multiplier=10000,
        display_decimals=5,
        contract_size=1,
    )


def resolve_instrument_spec(symbol: Optional[str]) -> InstrumentSpec:
    """
    Resolve the instrument spec for a symbol.

    Args:
        symbol: Raw symbol such as "EUR/USD", "xauusd" or "US30"

    Returns:
        InstrumentSpec; never raises
    """
    return _resolve(normalize_symbol(symbol))
