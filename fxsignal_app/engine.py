"""
Pattern analysis engine coordinator.

Orchestrates the scoring pipeline for one instrument:
Raw candles → Normalization → Patterns / Levels / Structure → Session gating
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence, Union

import structlog

from .analysis.candlesticks import CandlestickPattern, detect_candlestick_patterns
from .analysis.levels import (
    KeyLevels,
    PriceActionSignal,
    Trend,
    calculate_pattern_strength,
    detect_price_action,
    determine_trend,
    find_key_levels,
)
from .analysis.patterns import ChartPattern, PatternRecognizer
from .analysis.regime import NEUTRAL_REGIME, MarketRegime, detect_market_regime
from .analysis.structure import (
    MarketStructure,
    StructureHeadAndShoulders,
    analyze_market_structure,
    detect_structure_head_and_shoulders,
    is_retest_valid,
)
from .analysis.zones import AreaOfInterest, ZoneOverlap, cluster_structure_points, find_zone_overlaps
from .config.defaults import DefaultConfig
from .config.loader import ConfigLoader
from .data.models import Candle, SignalType, closes
from .data.normalizer import CandleNormalizer
from .errors import DataQualityError
from .instruments.pips import RiskLevels, SignalPerformance, calculate_performance, calculate_risk_levels
from .instruments.specs import normalize_symbol
from .metrics.atr import calculate_atr
from .monitoring.collector import MetricsCollector
from .sessions.market_hours import MarketSession, check_market_hours, is_data_stale
from .sessions.optimization import SessionAnalysis, analyze_trading_session
from .utils.time import format_market_time, get_market_time

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PatternAnalysis:
    """Complete analysis of one instrument at one point in time."""
    symbol: str
    timestamp: datetime
    market_session: MarketSession
    session_analysis: SessionAnalysis
    chart_patterns: list[ChartPattern] = field(default_factory=list)
    candlestick_patterns: list[CandlestickPattern] = field(default_factory=list)
    key_levels: KeyLevels = field(default_factory=KeyLevels)
    trend: Trend = Trend.SIDEWAYS
    price_action: Optional[PriceActionSignal] = None
    market_structure: Optional[MarketStructure] = None
    zones: tuple[AreaOfInterest, ...] = ()
    structure_reversal: Optional[StructureHeadAndShoulders] = None
    retest_valid: bool = False
    regime: MarketRegime = NEUTRAL_REGIME
    pattern_strength: float = 0.0

    @property
    def is_tradeable(self) -> bool:
        """Signals are only scored while the forex market is open."""
        return self.market_session.is_open

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "timestamp": format_market_time(self.timestamp),
            "is_tradeable": self.is_tradeable,
            "session": self.market_session.name,
            "session_analysis": asdict(self.session_analysis),
            "chart_patterns": [p.to_dict() for p in self.chart_patterns],
            "candlestick_patterns": [p.to_dict() for p in self.candlestick_patterns],
            "support_levels": list(self.key_levels.support_levels),
            "resistance_levels": list(self.key_levels.resistance_levels),
            "trend": self.trend.value,
            "price_action": asdict(self.price_action) if self.price_action else None,
            "structure_trend": self.market_structure.trend if self.market_structure else None,
            "zones": [asdict(z) for z in self.zones],
            "structure_reversal": asdict(self.structure_reversal) if self.structure_reversal else None,
            "retest_valid": self.retest_valid,
            "regime": asdict(self.regime),
            "pattern_strength": self.pattern_strength,
        }


class PatternAnalysisEngine:
    """
    Main coordinator for per-instrument pattern and signal scoring.

    Configuration is resolved per symbol (defaults, then symbol overrides
    from ``instruments.yaml``) and cached for the engine's lifetime.
    """

    def __init__(
        self,
        config_dir: Optional[Union[str, Path]] = None,
        collector: Optional[MetricsCollector] = None,
    ) -> None:
        """Initialize the pattern analysis engine."""
        self.logger = logger
        self.collector = collector

        self.config_loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        self.normalizer = CandleNormalizer()

        # Per-symbol configuration and recognizers
        self.configs: dict[str, DefaultConfig] = {}
        self.recognizers: dict[str, PatternRecognizer] = {}

        self.logger.info("Pattern analysis engine initialized", config_dir=str(self.config_loader.config_dir))

    def get_config(self, symbol: str) -> DefaultConfig:
        """Get (and cache) the merged configuration for a symbol."""
        key = normalize_symbol(symbol)
        if key not in self.configs:
            self.configs[key] = self.config_loader.build_config(key)
            self.recognizers[key] = PatternRecognizer(self.configs[key], self.collector)
        return self.configs[key]

    def analyze(
        self,
        symbol: str,
        candles: Sequence[Candle],
        now: Optional[datetime] = None,
    ) -> PatternAnalysis:
        """
        Analyze a candle series for one instrument.

        Args:
            symbol: Instrument symbol
            candles: Candles in chronological order
            now: Reference time for session gating, defaults to wall clock

        Returns:
            PatternAnalysis; pattern fields are empty when the series is
            shorter than the configured minimum
        """
        config = self.get_config(symbol)
        key = normalize_symbol(symbol)
        now = get_market_time(now)

        market_session = check_market_hours(now, config.session)
        session_analysis = analyze_trading_session(now)

        if len(candles) < config.engine.min_candles:
            self.logger.debug(
                "Not enough candles for pattern analysis",
                symbol=key,
                candles=len(candles),
                required=config.engine.min_candles,
            )
            return PatternAnalysis(
                symbol=key,
                timestamp=now,
                market_session=market_session,
                session_analysis=session_analysis,
            )

        if self.collector is not None:
            self.collector.increment("engine.analyses")

        chart_patterns = self.recognizers[key].detect_all(candles, symbol=key)
        candlestick_patterns = detect_candlestick_patterns(candles)

        atr = calculate_atr(candles, config.structure.atr_period)
        current_price = candles[-1].close
        regime = (
            detect_market_regime(closes(candles), atr, current_price)
            if atr is not None else NEUTRAL_REGIME
        )

        structure = analyze_market_structure(candles, config.structure)
        reversal = detect_structure_head_and_shoulders(
            candles, structure.trend, structure.structure_points, key, config.structure.retest_pips)

        analysis = PatternAnalysis(
            symbol=key,
            timestamp=now,
            market_session=market_session,
            session_analysis=session_analysis,
            chart_patterns=chart_patterns,
            candlestick_patterns=candlestick_patterns,
            key_levels=find_key_levels(candles, config.key_levels),
            trend=determine_trend(candles),
            price_action=detect_price_action(candles),
            market_structure=structure,
            zones=tuple(cluster_structure_points(structure.structure_points, key, config.zones)),
            structure_reversal=reversal,
            retest_valid=reversal is not None and is_retest_valid(reversal, candlestick_patterns),
            regime=regime,
            pattern_strength=calculate_pattern_strength(chart_patterns, candlestick_patterns),
        )

        self.logger.info(
            "Pattern analysis complete",
            symbol=key,
            chart_patterns=len(chart_patterns),
            candlestick_patterns=len(candlestick_patterns),
            trend=analysis.trend.value,
            pattern_strength=round(analysis.pattern_strength, 2),
            session=market_session.name,
            tradeable=analysis.is_tradeable,
        )

        return analysis

    def analyze_payload(
        self,
        symbol: str,
        rows: Iterable[dict[str, Any]],
        now: Optional[datetime] = None,
    ) -> Optional[PatternAnalysis]:
        """
        Normalize raw candle rows and analyze them.

        Returns:
            PatternAnalysis, or None when the payload fails data quality checks
        """
        try:
            candles = self.normalizer.parse_candles(rows)
        except DataQualityError as e:
            self.logger.warning(
                "Data quality issue in candle payload",
                symbol=symbol,
                error=str(e),
                error_type=type(e).__name__,
                context=e.context,
            )
            if self.collector is not None:
                self.collector.increment("engine.rejected_payloads")
            return None

        return self.analyze(symbol, candles, now)

    def evaluate_signal(
        self,
        entry_price: Optional[float],
        current_price: Optional[float],
        signal_type: Union[SignalType, str],
        symbol: str,
    ) -> SignalPerformance:
        """Compute and log the performance of an open signal."""
        performance = calculate_performance(entry_price, current_price, signal_type, symbol)

        self.logger.info(
            "Signal performance evaluated",
            symbol=normalize_symbol(symbol),
            signal_type=SignalType.parse(signal_type).value,
            pips=performance.pips,
            percentage=round(performance.percentage, 4),
            is_profit=performance.is_profit,
        )

        return performance

    def plan_risk(
        self,
        symbol: str,
        entry_price: float,
        signal_type: Union[SignalType, str],
        candles: Sequence[Candle] = (),
    ) -> RiskLevels:
        """
        Place stop loss and take profit with the symbol's risk parameters.

        ATR is taken from ``candles`` over the structure ATR period; without
        enough candles the stop falls back to the minimum pip distance.
        """
        config = self.get_config(symbol)
        key = normalize_symbol(symbol)
        atr = calculate_atr(candles, config.structure.atr_period)

        levels = calculate_risk_levels(entry_price, key, signal_type, atr, config.risk)

        if self.collector is not None:
            self.collector.increment("engine.risk_plans")

        self.logger.info(
            "Risk levels placed",
            symbol=key,
            signal_type=SignalType.parse(signal_type).value,
            atr=atr,
            stop_loss_pips=levels.stop_loss_pips,
            take_profit_pips=levels.take_profit_pips,
        )

        return levels

    def is_stale(
        self,
        symbol: str,
        timestamp: Union[datetime, int, float, str],
        now: Optional[datetime] = None,
    ) -> bool:
        """Whether data for ``symbol`` is older than its configured age limit."""
        return is_data_stale(timestamp, now=now, params=self.get_config(symbol).session)

    def find_zone_confluence(
        self,
        symbol: str,
        higher_candles: Sequence[Candle],
        lower_candles: Sequence[Candle],
    ) -> ZoneOverlap:
        """
        Find support/resistance zones shared by two timeframes.

        Args:
            symbol: Instrument symbol
            higher_candles: Higher timeframe series (e.g. weekly)
            lower_candles: Lower timeframe series (e.g. daily)

        Returns:
            ZoneOverlap; empty when either series yields no zones
        """
        config = self.get_config(symbol)
        key = normalize_symbol(symbol)

        zones = [
            cluster_structure_points(
                analyze_market_structure(candles, config.structure).structure_points, key, config.zones)
            for candles in (higher_candles, lower_candles)
        ]
        overlap = find_zone_overlaps(zones[0], zones[1], key, config.zones)

        self.logger.info(
            "Zone confluence evaluated",
            symbol=key,
            higher_zones=len(zones[0]),
            lower_zones=len(zones[1]),
            bonus_score=overlap.bonus_score,
        )

        return overlap
