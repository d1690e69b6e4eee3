"""Core data models for footprint tracking.

These models define the contract between components:
- Record parsers produce ActivityRecord
- The aggregator consumes records and produces UserCarbonStats
- The ranker consumes UserProjection and produces LeaderboardEntry
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Category(str, Enum):
    """Activity categories a footprint can be logged under."""

    TRANSPORT = "transport"
    ELECTRICITY = "electricity"
    FOOD = "food"
    WASTE = "waste"
    SHOPPING = "shopping"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: str | Category | None) -> Category | None:
        """Map a raw string to a Category, or None if it is not one."""
        if isinstance(raw, Category):
            return raw
        if not raw:
            return None
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


class Privacy(str, Enum):
    """Leaderboard visibility of a user."""

    PUBLIC = "public"
    PRIVATE = "private"
    FRIENDS = "friends"


DEFAULT_GOAL = 2000.0  # kg CO2 per year


# =============================================================================
# Activities
# =============================================================================


@dataclass(frozen=True)
class ActivityRecord:
    """A logged activity with its computed footprint (kg CO2)."""

    category: Category
    subcategory: str
    quantity: float
    unit: str
    footprint: float
    timestamp: datetime

    # Descriptive fields, carried through untouched
    activity: str = ""
    location: str | None = None
    notes: str | None = None
    tags: tuple[str, ...] = ()


# =============================================================================
# User statistics
# =============================================================================


@dataclass(frozen=True)
class UserCarbonStats:
    """Statistics derived from a user's activity records.

    Not authoritative: recompute whenever a record is added or removed.
    """

    total_footprint: float = 0.0
    weekly_average: float = 0.0
    monthly_average: float = 0.0
    goal: float = DEFAULT_GOAL
    level: int = 1
    experience: int = 0


@dataclass(frozen=True)
class CategoryStats:
    total: float
    count: int
    average: float


@dataclass(frozen=True)
class PeriodSummary:
    """Statistics over a reporting period (week, month, year)."""

    period: str
    start: datetime
    total_footprint: float
    average_per_day: float
    category_stats: dict[str, CategoryStats]
    activity_count: int
    all_time_total: float
    days_in_period: int
    weekly_total: float
    monthly_total: float


# =============================================================================
# Ranking
# =============================================================================


@dataclass(frozen=True)
class UserProjection:
    """A user's public-facing stats, as supplied for ranking."""

    username: str
    stats: UserCarbonStats = field(default_factory=UserCarbonStats)
    first_name: str = ""
    last_name: str = ""
    privacy: Privacy = Privacy.PUBLIC

    @property
    def total_footprint(self) -> float:
        return self.stats.total_footprint


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    username: str
    first_name: str
    last_name: str
    total_footprint: float
    weekly_average: float
    monthly_average: float
    level: int
    goal: float


@dataclass(frozen=True)
class UserRanking:
    rank: int
    total_users: int
    percentile: int
    total_footprint: float
    weekly_average: float
    monthly_average: float


# =============================================================================
# Suggestions and progress
# =============================================================================


@dataclass(frozen=True)
class Suggestion:
    """A reduction tip. Impact is negative kg CO2 per day."""

    action: str
    impact: float
    difficulty: str  # "easy" | "medium" | "hard"


@dataclass(frozen=True)
class GoalProgress:
    goal: float
    current: float
    progress: float  # percent, capped at 100
    weekly_progress: float
    monthly_progress: float
    level: int
    experience: int
