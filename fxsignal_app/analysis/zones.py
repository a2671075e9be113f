"""
Support and resistance zones (areas of interest).

Structure points are sorted by price and swept into clusters no wider
than ``max_width_pips``. Each cluster with enough touches becomes a zone
whose strength grows with its touch count and tightness. Zones found on
two timeframes that sit within ``overlap_pips`` of each other reinforce
each other.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence

from ..config.defaults import ZoneParams
from ..instruments.specs import resolve_instrument_spec
from .structure import StructurePoint


class ZoneType(str, Enum):
    SUPPORT = "support"
    RESISTANCE = "resistance"


@dataclass(frozen=True)
class AreaOfInterest:
    type: ZoneType
    price_level: float          # mean price of the clustered points
    width_pips: float
    strength: int               # 1-5
    touch_points: int
    first_seen: datetime
    last_tested: datetime


@dataclass(frozen=True)
class ZoneOverlap:
    support: tuple[AreaOfInterest, ...] = ()
    resistance: tuple[AreaOfInterest, ...] = ()
    bonus_score: int = 0


def create_area_of_interest(points: Sequence[StructurePoint], symbol: str,
                            params: Optional[ZoneParams] = None) -> AreaOfInterest:
    """
    Build a zone from a cluster of structure points

    The zone is support when the lowest point of the cluster is a swing
    low, resistance otherwise.
    """
    params = params or ZoneParams()
    pip_size = resolve_instrument_spec(symbol).pip_size

    prices = [p.price for p in points]
    width = (max(prices) - min(prices)) / pip_size

    strength = min(params.max_strength, len(points))
    if width <= params.optimal_width_pips:
        strength = min(params.max_strength, strength + 1)

    lowest = min(points, key=lambda p: p.price)
    timestamps = [p.timestamp for p in points]

    return AreaOfInterest(
        type=ZoneType.RESISTANCE if lowest.is_high else ZoneType.SUPPORT,
        price_level=sum(prices) / len(prices),
        width_pips=width,
        strength=strength,
        touch_points=len(points),
        first_seen=min(timestamps),
        last_tested=max(timestamps),
    )


def cluster_structure_points(points: Sequence[StructurePoint], symbol: str,
                             params: Optional[ZoneParams] = None) -> list[AreaOfInterest]:
    """
    Cluster structure points into support and resistance zones

    Args:
        points: Structure points in any order
        symbol: Instrument symbol, sets the pip size
        params: Width, touch and strength limits

    Returns:
        Zones ordered by price, lowest first
    """
    params = params or ZoneParams()
    pip_size = resolve_instrument_spec(symbol).pip_size

    zones: list[AreaOfInterest] = []
    cluster: list[StructurePoint] = []

    for point in sorted(points, key=lambda p: p.price):
        if cluster and (point.price - cluster[0].price) / pip_size > params.max_width_pips:
            if len(cluster) >= params.min_touches:
                zones.append(create_area_of_interest(cluster, symbol, params))
            cluster = []
        cluster.append(point)

    if len(cluster) >= params.min_touches:
        zones.append(create_area_of_interest(cluster, symbol, params))

    return zones


def split_zones(zones: Sequence[AreaOfInterest]) -> tuple[list[AreaOfInterest], list[AreaOfInterest]]:
    """Separate zones into (support, resistance)."""
    support = [z for z in zones if z.type is ZoneType.SUPPORT]
    resistance = [z for z in zones if z.type is ZoneType.RESISTANCE]
    return support, resistance


def _overlapping(higher: Sequence[AreaOfInterest], lower: Sequence[AreaOfInterest],
                 pip_size: float, params: ZoneParams) -> list[AreaOfInterest]:
    overlaps = []
    for zone in higher:
        for other in lower:
            if abs(zone.price_level - other.price_level) / pip_size <= params.overlap_pips:
                overlaps.append(replace(
                    zone,
                    strength=min(params.max_strength, zone.strength + 1),
                    touch_points=zone.touch_points + other.touch_points,
                ))
    return overlaps


def find_zone_overlaps(higher_zones: Sequence[AreaOfInterest], lower_zones: Sequence[AreaOfInterest],
                       symbol: str, params: Optional[ZoneParams] = None) -> ZoneOverlap:
    """
    Find zones confirmed on both a higher and a lower timeframe

    Each higher-timeframe zone within ``overlap_pips`` of a lower-timeframe
    zone of the same type is kept with one extra strength point and the
    touches of both. Every overlap adds ``overlap_bonus`` to the score.
    """
    params = params or ZoneParams()
    pip_size = resolve_instrument_spec(symbol).pip_size

    higher_support, higher_resistance = split_zones(higher_zones)
    lower_support, lower_resistance = split_zones(lower_zones)

    support = _overlapping(higher_support, lower_support, pip_size, params)
    resistance = _overlapping(higher_resistance, lower_resistance, pip_size, params)

    return ZoneOverlap(
        support=tuple(support),
        resistance=tuple(resistance),
        bonus_score=(len(support) + len(resistance)) * params.overlap_bonus,
    )
