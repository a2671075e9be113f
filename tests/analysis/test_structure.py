"""Tests for market structure analysis"""

from datetime import datetime, timedelta, timezone

import pytest

from fxsignal_app.analysis.candlesticks import CandlestickPattern
from fxsignal_app.analysis.structure import (
    ReversalType,
    StructureLabel,
    StructurePoint,
    analyze_market_structure,
    classify_structure_points,
    detect_structure_head_and_shoulders,
    determine_market_structure,
    identify_structure_points,
    is_retest_valid,
)

TS = datetime(2024, 1, 3, tzinfo=timezone.utc)


def points_from(*swings):
    """Build unlabelled points from (is_high, price) pairs."""
    return [
        StructurePoint(is_high, StructureLabel.HH if is_high else StructureLabel.LL,
                       price, TS + timedelta(hours=i), i)
        for i, (is_high, price) in enumerate(swings)
    ]


def zigzag_candles(candle_factory, count=60):
    shape = [0, 1, 2, 3, 2, 1]
    values = [1.1 + 0.01 * shape[i % 6] for i in range(count)]
    return candle_factory([v + 0.002 for v in values], [v - 0.002 for v in values], values)


class TestIdentifyStructurePoints:
    """Test swing point extraction"""

    def test_single_swing_high(self, candle_factory):
        highs = [1, 2, 3, 4, 10, 4, 3, 2, 1]
        candles = candle_factory(highs, [h - 0.5 for h in highs])

        points = identify_structure_points(candles, atr=1.0)

        assert len(points) == 1
        assert points[0].is_high
        assert points[0].price == 10
        assert points[0].index == 4
        assert points[0].timestamp == candles[4].ts

    def test_minimum_swing_size(self, candle_factory):
        highs = [1, 2, 5, 2, 1, 2, 5.1, 2, 1]
        candles = candle_factory(highs, [h - 0.5 for h in highs])

        assert len(identify_structure_points(candles, atr=1.0)) == 3
        assert len(identify_structure_points(candles, atr=20.0)) == 1


class TestClassifyStructurePoints:
    """Test HH/HL/LH/LL labelling"""

    def test_labels_against_previous_same_kind(self):
        points = points_from((False, 1.0), (True, 1.2), (False, 1.1), (True, 1.3), (True, 1.25), (False, 0.9))
        labels = [p.label for p in classify_structure_points(points)]

        assert labels == [
            StructureLabel.LL,
            StructureLabel.HH,
            StructureLabel.HL,
            StructureLabel.HH,
            StructureLabel.LH,
            StructureLabel.LL,
        ]


class TestDetermineMarketStructure:
    """Test trend and break detection"""

    def test_bullish_structure_with_upside_break(self):
        points = points_from((False, 1.0), (True, 1.2), (False, 1.1), (True, 1.3))
        structure = determine_market_structure(points, current_price=1.35)

        assert structure.trend == "bullish"
        assert structure.current_high == 1.3
        assert structure.current_low == 1.0
        assert structure.last_break == "upside"

    def test_bearish_structure_with_downside_break(self):
        points = points_from((True, 1.3), (False, 1.2), (True, 1.25), (False, 1.1))
        structure = determine_market_structure(points, current_price=1.05)

        assert structure.trend == "bearish"
        assert structure.last_break == "downside"

    def test_no_break_inside_range(self):
        points = points_from((False, 1.0), (True, 1.2), (False, 1.1), (True, 1.3))
        assert determine_market_structure(points, current_price=1.15).last_break is None

    def test_too_few_points(self):
        points = points_from((False, 1.0), (True, 1.2), (False, 1.1))
        structure = determine_market_structure(points, current_price=1.15)

        assert structure.trend == "neutral"
        assert structure.confidence == 0.0

    def test_points_are_immutable(self):
        points = points_from((False, 1.0), (True, 1.2), (False, 1.1), (True, 1.3))
        structure = determine_market_structure(points, current_price=1.15)

        assert isinstance(structure.structure_points, tuple)
        assert len(structure.structure_points) == 4


class TestAnalyzeMarketStructure:
    """Test the full structure pipeline"""

    def test_short_series_is_neutral(self, candle_factory):
        structure = analyze_market_structure(zigzag_candles(candle_factory, 49))

        assert structure.trend == "neutral"
        assert structure.confidence == 0.0
        assert structure.structure_points == ()

    def test_confidence_capped(self, candle_factory):
        structure = analyze_market_structure(zigzag_candles(candle_factory))

        # Equal swings alternate LH/HL labels
        assert structure.trend == "neutral"
        assert structure.confidence == pytest.approx(95.0)
        assert len(structure.structure_points) == 19


def swing(is_high, price, index):
    label = StructureLabel.HH if is_high else StructureLabel.LL
    return StructurePoint(is_high, label, price, TS + timedelta(hours=index), index)


@pytest.fixture
def topping_candles(candle_factory):
    """Swing highs at bars 2, 5 and 8 with a lower low after the head."""
    highs = [1.18] * 12
    highs[2], highs[5], highs[8] = 1.20, 1.25, 1.22
    lows = [1.17] * 12
    lows[3], lows[7], lows[11] = 1.15, 1.14, 1.144
    closes = [1.175] * 12
    closes[11] = 1.1448
    return candle_factory(highs, lows, closes)


@pytest.fixture
def bottoming_candles(candle_factory):
    """Swing lows at bars 2, 5 and 8 with a higher high after the head."""
    highs = [1.02] * 12
    highs[3], highs[7] = 1.05, 1.06
    lows = [1.01] * 12
    lows[2], lows[5], lows[8] = 1.00, 0.95, 0.98
    return candle_factory(highs, lows)


TOP_SWINGS = [swing(True, 1.20, 2), swing(False, 1.15, 3), swing(True, 1.25, 5),
              swing(False, 1.14, 7), swing(True, 1.22, 8)]
BOTTOM_SWINGS = [swing(False, 1.00, 2), swing(True, 1.05, 3), swing(False, 0.95, 5),
                 swing(True, 1.06, 7), swing(False, 0.98, 8)]


class TestStructureHeadAndShoulders:
    """Test head and shoulders over structure points"""

    def test_bearish_pattern_in_bullish_structure(self, topping_candles):
        pattern = detect_structure_head_and_shoulders(topping_candles, "bullish", TOP_SWINGS, "EURUSD")

        assert pattern is not None
        assert pattern.pattern_type == ReversalType.BEARISH_HS
        assert pattern.direction == "bearish"
        assert (pattern.left_shoulder.index, pattern.head.index, pattern.right_shoulder.index) == (2, 5, 8)
        assert pattern.neckline == pytest.approx(1.145)
        assert pattern.target == pytest.approx(1.04)
        assert pattern.is_confirmed is True
        assert pattern.is_retest_setup is True

    def test_inverted_pattern_in_bearish_structure(self, bottoming_candles):
        pattern = detect_structure_head_and_shoulders(bottoming_candles, "bearish", BOTTOM_SWINGS, "EURUSD")

        assert pattern is not None
        assert pattern.pattern_type == ReversalType.BULLISH_INVERTED_HS
        assert pattern.direction == "bullish"
        assert pattern.neckline == pytest.approx(1.055)
        assert pattern.target == pytest.approx(1.16)
        assert pattern.is_confirmed is False
        assert pattern.is_retest_setup is False

    def test_neutral_structure(self, topping_candles):
        assert detect_structure_head_and_shoulders(topping_candles, "neutral", TOP_SWINGS, "EURUSD") is None

    def test_head_must_be_extreme(self, topping_candles):
        swings = [swing(True, 1.20, 2), swing(True, 1.19, 5), swing(True, 1.22, 8)]
        assert detect_structure_head_and_shoulders(topping_candles, "bullish", swings, "EURUSD") is None

    def test_neckline_must_slope_against_trend(self, candle_factory):
        highs = [1.18] * 12
        highs[2], highs[5], highs[8] = 1.20, 1.25, 1.22
        lows = [1.17] * 12
        lows[3], lows[7] = 1.14, 1.15
        candles = candle_factory(highs, lows)

        assert detect_structure_head_and_shoulders(candles, "bullish", TOP_SWINGS, "EURUSD") is None

    def test_too_few_points(self, topping_candles):
        assert detect_structure_head_and_shoulders(topping_candles, "bullish", TOP_SWINGS[:2], "EURUSD") is None

    def test_retest_distance(self, topping_candles):
        pattern = detect_structure_head_and_shoulders(
            topping_candles, "bullish", TOP_SWINGS, "EURUSD", retest_pips=1)
        assert pattern.is_retest_setup is False


class TestIsRetestValid:
    """Test candlestick confirmation of a neckline retest"""

    def test_confirmed_by_matching_candle(self, topping_candles):
        pattern = detect_structure_head_and_shoulders(topping_candles, "bullish", TOP_SWINGS, "EURUSD")

        assert is_retest_valid(pattern, [CandlestickPattern("Shooting Star", "bearish", 75, "", "medium")])

    def test_weak_or_opposite_candles(self, topping_candles):
        pattern = detect_structure_head_and_shoulders(topping_candles, "bullish", TOP_SWINGS, "EURUSD")

        assert not is_retest_valid(pattern, [CandlestickPattern("Shooting Star", "bearish", 60, "", "medium")])
        assert not is_retest_valid(pattern, [CandlestickPattern("Hammer", "bullish", 80, "", "medium")])

    def test_requires_retest_setup(self, bottoming_candles):
        pattern = detect_structure_head_and_shoulders(bottoming_candles, "bearish", BOTTOM_SWINGS, "EURUSD")

        assert not is_retest_valid(pattern, [CandlestickPattern("Hammer", "bullish", 90, "", "high")])
