"""Tests for candle payload normalization"""

from datetime import datetime, timezone

import pytest

from fxsignal_app.data.models import Candle, SignalType
from fxsignal_app.data.normalizer import CandleNormalizer, normalize_candles
from fxsignal_app.errors import (
    DataQualityError,
    InsufficientDataError,
    MalformedDataError,
    MissingDataError,
    TemporalDataError,
)


@pytest.fixture
def normalizer():
    return CandleNormalizer()


def row(ts, close=1.1, **overrides):
    data = {"timestamp": ts, "open": 1.1, "high": 1.105, "low": 1.095, "close": close}
    data.update(overrides)
    return data


class TestParseCandle:
    """Test single row parsing"""

    def test_epoch_millis(self, normalizer, sample_candle_row):
        candle = normalizer.parse_candle(sample_candle_row)

        assert isinstance(candle, Candle)
        assert candle.ts == datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)
        assert candle.close == 1.1030
        assert candle.volume == 1000.0

    def test_field_aliases(self, normalizer):
        candle = normalizer.parse_candle({
            "time": "2024-01-03T12:00:00Z",
            "o": "1.1",
            "h": "1.2",
            "l": "1.0",
            "c": "1.15",
            "vol": 5,
        })

        assert candle.ts == datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)
        assert candle.open == 1.1
        assert candle.high == 1.2
        assert candle.volume == 5.0

    def test_epoch_seconds_and_default_volume(self, normalizer):
        candle = normalizer.parse_candle(row(1704283200))

        assert candle.ts == datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)
        assert candle.volume == 0.0

    def test_missing_field(self, normalizer):
        data = row(1704283200)
        del data["close"]

        with pytest.raises(MissingDataError) as exc_info:
            normalizer.parse_candle(data)

        assert exc_info.value.field == "close"
        assert exc_info.value.recoverable is True

    def test_missing_field_with_mixed_key_types(self, normalizer):
        data = row(1704283200)
        del data["close"]
        data[7] = "extra"

        with pytest.raises(MissingDataError) as exc_info:
            normalizer.parse_candle(data)

        assert exc_info.value.field == "close"
        assert "7" in exc_info.value.context["keys"]

    @pytest.mark.parametrize("value", ["abc", True, float("nan"), float("inf"), [1.1]])
    def test_non_numeric_price(self, normalizer, value):
        with pytest.raises(MalformedDataError):
            normalizer.parse_candle(row(1704283200, close=value))

    def test_invalid_timestamp(self, normalizer):
        with pytest.raises(MalformedDataError) as exc_info:
            normalizer.parse_candle(row("not a date"))
        assert exc_info.value.expected_format is not None

    def test_not_a_mapping(self, normalizer):
        with pytest.raises(MalformedDataError):
            normalizer.parse_candle([1, 2, 3])

    def test_high_below_close(self, normalizer):
        with pytest.raises(MalformedDataError):
            normalizer.parse_candle(row(1704283200, close=1.2))

    def test_low_above_open(self, normalizer):
        with pytest.raises(MalformedDataError):
            normalizer.parse_candle(row(1704283200, low=1.101))

    def test_consistency_check_can_be_disabled(self):
        candle = CandleNormalizer(check_ohlc_consistency=False).parse_candle(row(1704283200, close=1.2))
        assert candle.close == 1.2


class TestParseCandles:
    """Test series parsing"""

    def test_ordered_series(self, normalizer):
        candles = normalizer.parse_candles([row(1704283200), row(1704286800)])

        assert len(candles) == 2
        assert candles[0].ts < candles[1].ts

    def test_non_increasing_timestamps(self, normalizer):
        with pytest.raises(TemporalDataError) as exc_info:
            normalizer.parse_candles([row(1704286800), row(1704283200)])

        assert exc_info.value.previous_timestamp == datetime(2024, 1, 3, 13, 0, tzinfo=timezone.utc)

    def test_duplicate_timestamps(self, normalizer):
        with pytest.raises(TemporalDataError):
            normalizer.parse_candles([row(1704283200), row(1704283200)])

    def test_min_count(self, normalizer):
        with pytest.raises(InsufficientDataError) as exc_info:
            normalizer.parse_candles([row(1704283200)], min_count=2)

        assert exc_info.value.required_count == 2
        assert exc_info.value.available_count == 1

    def test_errors_share_base_class(self, normalizer):
        with pytest.raises(DataQualityError):
            normalizer.parse_candles([{"timestamp": 1704283200}])

    def test_module_helper(self):
        assert len(normalize_candles([row(1704283200)])) == 1


class TestSignalType:

    @pytest.mark.parametrize("value", ["BUY", "buy", " Buy ", SignalType.BUY])
    def test_parse(self, value):
        assert SignalType.parse(value) is SignalType.BUY

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown signal type"):
            SignalType.parse("HOLD")
