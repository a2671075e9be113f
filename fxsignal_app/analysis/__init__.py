"""Pattern, level, structure and regime analysis over candle series"""

from .candlesticks import CandlestickPattern, analyze_candle_structure, detect_candlestick_patterns
from .extrema import find_peaks, find_troughs
from .levels import (
    KeyLevels,
    PriceActionSignal,
    Trend,
    calculate_pattern_strength,
    detect_price_action,
    determine_trend,
    find_key_levels,
)
from .patterns import (
    ChartPattern,
    PatternRecognizer,
    PatternType,
    detect_all_patterns,
    detect_ascending_triangle,
    detect_double_bottom,
    detect_double_top,
    detect_head_and_shoulders,
)
from .regime import MarketRegime, detect_market_regime
from .structure import (
    MarketStructure,
    StructureHeadAndShoulders,
    StructurePoint,
    analyze_market_structure,
    detect_structure_head_and_shoulders,
    is_retest_valid,
)
from .zones import AreaOfInterest, ZoneOverlap, ZoneType, cluster_structure_points, find_zone_overlaps

__all__ = [
    "AreaOfInterest",
    "CandlestickPattern",
    "ChartPattern",
    "KeyLevels",
    "MarketRegime",
    "MarketStructure",
    "PatternRecognizer",
    "PatternType",
    "PriceActionSignal",
    "StructureHeadAndShoulders",
    "StructurePoint",
    "Trend",
    "ZoneOverlap",
    "ZoneType",
    "analyze_candle_structure",
    "analyze_market_structure",
    "calculate_pattern_strength",
    "cluster_structure_points",
    "detect_all_patterns",
    "detect_ascending_triangle",
    "detect_candlestick_patterns",
    "detect_double_bottom",
    "detect_double_top",
    "detect_head_and_shoulders",
    "detect_market_regime",
    "detect_price_action",
    "detect_structure_head_and_shoulders",
    "determine_trend",
    "find_key_levels",
    "find_peaks",
    "find_troughs",
    "find_zone_overlaps",
    "is_retest_valid",
]
