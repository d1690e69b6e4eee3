"""Typed event dataclasses for ecotrack observability.

All events are frozen (immutable) dataclasses. Modules emit these;
they don't know about logs or sinks. Subscribers handle routing.
"""

from __future__ import annotations

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Factors and calculation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FactorTableLoaded:
    variant: str  # "nested" | "flat"
    source_path: str | None
    category_count: int
    factor_count: int


@dataclass(frozen=True)
class FootprintCalculated:
    category: str
    subcategory: str
    quantity: float
    unit: str | None
    factor: float
    footprint: float


@dataclass(frozen=True)
class UnknownEmissionFactor:
    """A lookup fell through to a zero contribution."""

    category: str
    subcategory: str


# ---------------------------------------------------------------------------
# Aggregation and ranking
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StatsRecomputed:
    record_count: int
    total_footprint: float
    weekly_average: float
    monthly_average: float
    timestamp: str  # ISO, the reference "now"


@dataclass(frozen=True)
class LeaderboardRanked:
    entry_count: int
    tie_count: int  # entries sharing the previous entry's rank
