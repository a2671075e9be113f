"""Unit tests for the pattern analysis engine."""

from datetime import datetime, timedelta, timezone

import pytest

from fxsignal_app.analysis.patterns import PatternType
from fxsignal_app.engine import PatternAnalysis, PatternAnalysisEngine
from fxsignal_app.instruments.pips import SignalPerformance
from fxsignal_app.monitoring.collector import MetricsCollector
from fxsignal_app.sessions.market_hours import MARKET_CLOSED


@pytest.fixture
def collector() -> MetricsCollector:
    return MetricsCollector()


@pytest.fixture
def engine(collector: MetricsCollector) -> PatternAnalysisEngine:
    return PatternAnalysisEngine(collector=collector)


def to_rows(candles):
    return [
        {
            "timestamp": c.ts.isoformat(),
            "open": c.open,
            "high": c.high,
            "low": c.low,
            "close": c.close,
        }
        for c in candles
    ]


class TestPatternAnalysisEngine:
    """Test suite for the engine coordinator."""

    def test_engine_initialization(self, engine: PatternAnalysisEngine) -> None:
        assert engine.configs == {}
        assert engine.recognizers == {}

    def test_config_cached_per_normalized_symbol(self, engine: PatternAnalysisEngine) -> None:
        first = engine.get_config("xau/usd")
        second = engine.get_config("XAUUSD")

        assert first is second
        assert first.double_pattern.max_price_diff == 0.01
        assert list(engine.recognizers) == ["XAUUSD"]

    def test_analyze_open_market(self, engine, collector, double_top_candles, weekday_noon) -> None:
        analysis = engine.analyze("EUR/USD", double_top_candles, now=weekday_noon)

        assert isinstance(analysis, PatternAnalysis)
        assert analysis.symbol == "EURUSD"
        assert analysis.is_tradeable is True
        assert analysis.chart_patterns[0].type == PatternType.DOUBLE_TOP
        assert analysis.pattern_strength > 0
        assert analysis.session_analysis.session == "Overlap"
        assert collector.counters["engine.analyses"] == 1
        assert collector.counters["patterns.double_top"] == 1

    def test_closed_market_is_not_tradeable(self, engine, double_top_candles, saturday_noon) -> None:
        analysis = engine.analyze("EURUSD", double_top_candles, now=saturday_noon)

        assert analysis.is_tradeable is False
        assert analysis.market_session.name == MARKET_CLOSED
        assert analysis.chart_patterns

    def test_short_series_returns_empty_analysis(self, engine, collector, double_top_candles,
                                                 weekday_noon) -> None:
        analysis = engine.analyze("EURUSD", double_top_candles[:9], now=weekday_noon)

        assert analysis.chart_patterns == []
        assert analysis.candlestick_patterns == []
        assert analysis.pattern_strength == 0.0
        assert "engine.analyses" not in collector.counters

    def test_analyze_payload(self, engine, double_top_candles, weekday_noon) -> None:
        analysis = engine.analyze_payload("EURUSD", to_rows(double_top_candles), now=weekday_noon)

        assert analysis is not None
        assert analysis.chart_patterns == engine.analyze("EURUSD", double_top_candles, now=weekday_noon).chart_patterns

    def test_bad_payload_is_rejected(self, engine, collector, double_top_candles, weekday_noon) -> None:
        rows = to_rows(double_top_candles)
        rows[3], rows[4] = rows[4], rows[3]

        assert engine.analyze_payload("EURUSD", rows, now=weekday_noon) is None
        assert collector.counters["engine.rejected_payloads"] == 1

    def test_to_dict(self, engine, double_top_candles, weekday_noon) -> None:
        data = engine.analyze("EURUSD", double_top_candles, now=weekday_noon).to_dict()

        assert data["symbol"] == "EURUSD"
        assert data["timestamp"] == "2024-01-03T12:00:00+00:00"
        assert data["is_tradeable"] is True
        assert data["chart_patterns"][0]["type"] == "Double Top"

    def test_evaluate_signal(self, engine) -> None:
        performance = engine.evaluate_signal(150.00, 149.50, "sell", "USDJPY")

        assert isinstance(performance, SignalPerformance)
        assert performance.pips == 50
        assert performance.is_profit is True

    def test_custom_config_dir(self, tmp_path, double_top_candles) -> None:
        (tmp_path / "instruments.yaml").write_text(
            "instruments:\n"
            "  EURUSD:\n"
            "    engine:\n"
            "      min_candles: 50\n"
        )
        engine = PatternAnalysisEngine(config_dir=tmp_path)
        now = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)

        assert engine.analyze("EURUSD", double_top_candles, now=now).chart_patterns == []


class TestRiskPlanning:
    """Risk levels follow the per-symbol risk configuration."""

    def test_default_risk_without_candles(self, engine, collector) -> None:
        levels = engine.plan_risk("EURUSD", 1.1, "BUY")

        assert levels.stop_loss == pytest.approx(1.097)
        assert levels.stop_loss_pips == 30
        assert levels.take_profit == pytest.approx(1.106)
        assert levels.take_profit_pips == 60
        assert levels.risk_reward == pytest.approx(2.0)
        assert collector.counters["engine.risk_plans"] == 1

    def test_symbol_minimum_stop_override(self, engine) -> None:
        levels = engine.plan_risk("XAU/USD", 2000.0, "BUY")

        assert levels.stop_loss_pips == 50
        assert levels.stop_loss == pytest.approx(1995.0)
        assert levels.take_profit == pytest.approx(2010.0)

    def test_symbol_atr_multiplier_override(self, engine, candle_factory) -> None:
        candles = candle_factory([190.5] * 20, [189.5] * 20)

        levels = engine.plan_risk("GBPJPY", 190.0, "SELL", candles)

        assert levels.stop_loss == pytest.approx(192.5)
        assert levels.stop_loss_pips == 250
        assert levels.take_profit == pytest.approx(185.0)
        assert levels.take_profit_pips == 500

    def test_degenerate_entry(self, engine) -> None:
        levels = engine.plan_risk("EURUSD", float("nan"), "SELL")

        assert levels.stop_loss == 0.0
        assert levels.take_profit == 0.0
        assert levels.stop_loss_pips == 0
        assert levels.risk_reward == 0.0

    def test_staleness_uses_symbol_session_config(self, tmp_path, weekday_noon) -> None:
        (tmp_path / "instruments.yaml").write_text(
            "instruments:\n"
            "  US30:\n"
            "    session:\n"
            "      stale_after_minutes: 60\n"
        )
        engine = PatternAnalysisEngine(config_dir=tmp_path)
        timestamp = weekday_noon - timedelta(minutes=30)

        assert engine.is_stale("US30", timestamp, now=weekday_noon) is False
        assert engine.is_stale("EURUSD", timestamp, now=weekday_noon) is True


def zigzag(candle_factory, count=60):
    """Equal swings: highs at 1.132 on bars 3, 9, ... and lows at 1.098 on bars 6, 12, ..."""
    shape = [0, 1, 2, 3, 2, 1]
    values = [1.1 + 0.01 * shape[i % 6] for i in range(count)]
    return candle_factory([v + 0.002 for v in values], [v - 0.002 for v in values], values)


class TestZones:
    """Structure zones in the analysis and across timeframes."""

    def test_analysis_reports_zones(self, engine, candle_factory, weekday_noon) -> None:
        analysis = engine.analyze("EURUSD", zigzag(candle_factory), now=weekday_noon)

        assert [z.type.value for z in analysis.zones] == ["support", "resistance"]
        assert analysis.zones[0].price_level == pytest.approx(1.098)
        assert analysis.zones[1].price_level == pytest.approx(1.132)
        # Equal swings give a neutral structure, so no reversal is reported
        assert analysis.structure_reversal is None
        assert analysis.retest_valid is False
        assert len(analysis.to_dict()["zones"]) == 2

    def test_zone_confluence(self, engine, candle_factory) -> None:
        candles = zigzag(candle_factory)

        overlap = engine.find_zone_confluence("EURUSD", candles, candles)

        assert len(overlap.support) == 1
        assert len(overlap.resistance) == 1
        assert overlap.support[0].touch_points == 18
        assert overlap.resistance[0].touch_points == 20
        assert overlap.bonus_score == 20

    def test_no_confluence_on_short_series(self, engine, candle_factory) -> None:
        candles = zigzag(candle_factory)

        overlap = engine.find_zone_confluence("EURUSD", candles, candles[:20])

        assert overlap.bonus_score == 0
