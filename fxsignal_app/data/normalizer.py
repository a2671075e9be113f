"""
Candle payload normalization.

Market-data rows reach this library as loosely shaped dicts: keys differ
between feeds (``timestamp``/``time``/``ts``, ``open``/``open_price``) and
timestamps arrive as epoch seconds, epoch milliseconds or ISO strings.
This module maps them onto the typed ``Candle`` record and rejects rows
that would corrupt downstream detectors.
"""

import math
from typing import Any, Iterable, Optional

import structlog

from ..errors import (
    InsufficientDataError,
    MalformedDataError,
    MissingDataError,
    TemporalDataError,
)
from ..utils.time import parse_timestamp
from .models import Candle

logger = structlog.get_logger(__name__)

# Accepted aliases per field, checked in order
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "ts": ("timestamp", "time", "ts", "datetime"),
    "open": ("open", "open_price", "o"),
    "high": ("high", "high_price", "h"),
    "low": ("low", "low_price", "l"),
    "close": ("close", "close_price", "c"),
    "volume": ("volume", "vol", "v"),
}

REQUIRED_FIELDS = ("ts", "open", "high", "low", "close")


class CandleNormalizer:
    """Maps raw candle payloads onto validated ``Candle`` records."""

    def __init__(self, check_ohlc_consistency: bool = True):
        self.check_ohlc_consistency = check_ohlc_consistency

    def parse_candle(self, raw: dict[str, Any]) -> Candle:
        """
        Parse a single raw candle row.

        Args:
            raw: Candle payload from the market-data layer

        Returns:
            Normalized candle

        Raises:
            MissingDataError: If a required field is absent
            MalformedDataError: If a value cannot be parsed or OHLC is inconsistent
        """
        if not isinstance(raw, dict):
            raise MalformedDataError(
                "Candle payload must be a mapping",
                raw_data=repr(raw),
                expected_format="dict",
            )

        values: dict[str, Any] = {}
        for field in FIELD_ALIASES:
            value = self._lookup(raw, field)
            if value is None and field in REQUIRED_FIELDS:
                raise MissingDataError(
                    f"Candle field '{field}' is missing",
                    data_type="candle",
                    field=field,
                    context={"keys": sorted(map(str, raw))},
                )
            values[field] = value

        try:
            ts = parse_timestamp(values["ts"])
        except (ValueError, OverflowError, OSError) as e:
            raise MalformedDataError(
                f"Invalid candle timestamp: {e}",
                raw_data=repr(values["ts"]),
                expected_format="epoch seconds, epoch milliseconds or ISO8601",
            ) from e

        prices = {name: self._to_float(name, values[name]) for name in ("open", "high", "low", "close")}
        volume = 0.0 if values["volume"] is None else self._to_float("volume", values["volume"])

        if self.check_ohlc_consistency:
            self._validate_ohlc(prices)

        return Candle(
            ts=ts,
            open=prices["open"],
            high=prices["high"],
            low=prices["low"],
            close=prices["close"],
            volume=volume,
        )

    def parse_candles(self, rows: Iterable[dict[str, Any]], min_count: int = 0) -> list[Candle]:
        """
        Parse an ordered series of raw candle rows.

        Args:
            rows: Raw rows in chronological order
            min_count: Minimum number of candles the caller requires

        Returns:
            Candles with strictly increasing timestamps

        Raises:
            TemporalDataError: If timestamps are not strictly increasing
            InsufficientDataError: If fewer than ``min_count`` rows were supplied
        """
        candles: list[Candle] = []
        previous: Optional[Candle] = None

        for raw in rows:
            candle = self.parse_candle(raw)
            if previous is not None and candle.ts <= previous.ts:
                raise TemporalDataError(
                    f"Candle timestamps must be strictly increasing: {candle.ts} after {previous.ts}",
                    timestamp=candle.ts,
                    previous_timestamp=previous.ts,
                    context={"index": len(candles)},
                )
            candles.append(candle)
            previous = candle

        if len(candles) < min_count:
            raise InsufficientDataError(
                f"Need at least {min_count} candles, got {len(candles)}",
                required_count=min_count,
                available_count=len(candles),
            )

        logger.debug("Candles normalized", count=len(candles))
        return candles

    @staticmethod
    def _lookup(raw: dict[str, Any], field: str) -> Any:
        for key in FIELD_ALIASES[field]:
            if raw.get(key) is not None:
                return raw[key]
        return None

    @staticmethod
    def _to_float(name: str, value: Any) -> float:
        if isinstance(value, bool):
            raise MalformedDataError(f"Field '{name}' is not numeric", raw_data=repr(value))
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise MalformedDataError(
                f"Field '{name}' is not numeric",
                raw_data=repr(value),
                expected_format="number",
            ) from e

        if not math.isfinite(number):
            raise MalformedDataError(f"Field '{name}' is not finite", raw_data=repr(value))
        return number

    @staticmethod
    def _validate_ohlc(prices: dict[str, float]) -> None:
        if prices["high"] < max(prices["open"], prices["close"], prices["low"]):
            raise MalformedDataError(
                f"High {prices['high']} below open/close/low",
                context={"prices": prices},
            )
        if prices["low"] > min(prices["open"], prices["close"]):
            raise MalformedDataError(
                f"Low {prices['low']} above open/close",
                context={"prices": prices},
            )


def normalize_candles(rows: Iterable[dict[str, Any]], min_count: int = 0) -> list[Candle]:
    """Parse raw rows with a default ``CandleNormalizer``."""
    return CandleNormalizer().parse_candles(rows, min_count=min_count)
