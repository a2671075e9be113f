"""Default configuration parameters for pattern and signal scoring."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DoublePatternParams:
    """Double top / double bottom detection parameters."""
    min_candles: int = 20                 # Minimum series length
    window: int = 20                      # Trailing candles scanned for extrema
    min_distance: int = 3                 # Extrema window half-width
    max_price_diff: float = 0.02          # Max relative difference between the two extremes
    min_separation: int = 5               # Extremes must be more than this many bars apart
    base_confidence: float = 70.0
    confidence_range: float = 30.0
    retracement: float = 0.618            # Target retracement ratio


@dataclass(frozen=True)
class HeadShouldersParams:
    """Head and shoulders detection parameters."""
    min_candles: int = 25
    window: int = 25
    min_distance: int = 4
    max_shoulder_diff: float = 0.03       # Max relative shoulder height difference
    base_confidence: float = 75.0
    confidence_range: float = 25.0


@dataclass(frozen=True)
class TriangleParams:
    """Ascending triangle detection parameters."""
    min_candles: int = 15
    window: int = 15
    resistance_tolerance: float = 0.01    # Highs within this fraction of the max count as touches
    min_touches: int = 2
    confidence: float = 65.0
    target_ratio: float = 0.5             # Fraction of triangle height projected above resistance


@dataclass(frozen=True)
class KeyLevelParams:
    """Support/resistance level grouping parameters."""
    min_candles: int = 20
    swing_window: int = 2
    group_tolerance: float = 0.001        # Levels within 0.1% are merged
    max_levels: int = 5


@dataclass(frozen=True)
class StructureParams:
    """Market structure analysis parameters."""
    atr_period: int = 14
    min_swing_atr: float = 0.5            # Min distance between structure points in ATRs
    min_points: int = 4
    retest_pips: int = 10                 # Max distance from the neckline for a retest setup


@dataclass(frozen=True)
class ZoneParams:
    """Support/resistance zone clustering parameters."""
    max_width_pips: int = 60              # Widest cluster of structure points
    optimal_width_pips: int = 25          # Clusters this tight earn extra strength
    min_touches: int = 3
    max_strength: int = 5
    overlap_pips: int = 10                # Zones this close on two timeframes overlap
    overlap_bonus: int = 10               # Score per overlapping zone


@dataclass(frozen=True)
class RiskParams:
    """Stop loss / take profit sizing parameters."""
    atr_multiplier: float = 2.2
    min_stop_pips: int = 30
    min_take_profit_pips: int = 15
    reward_ratio: float = 2.0             # Take profit distance as a multiple of the stop distance


@dataclass(frozen=True)
class SessionParams:
    """Forex trading week boundaries (UTC)."""
    close_weekday: int = 4                # Friday (Monday == 0)
    close_hour: int = 22
    open_weekday: int = 6                 # Sunday
    open_hour: int = 22
    stale_after_minutes: int = 10


@dataclass(frozen=True)
class EngineParams:
    """Analysis engine parameters."""
    min_candles: int = 10


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    double_pattern: DoublePatternParams
    head_shoulders: HeadShouldersParams
    triangle: TriangleParams
    key_levels: KeyLevelParams
    structure: StructureParams
    zones: ZoneParams
    risk: RiskParams
    session: SessionParams
    engine: EngineParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        double_pattern=DoublePatternParams(),
        head_shoulders=HeadShouldersParams(),
        triangle=TriangleParams(),
        key_levels=KeyLevelParams(),
        structure=StructureParams(),
        zones=ZoneParams(),
        risk=RiskParams(),
        session=SessionParams(),
        engine=EngineParams(),
    )
