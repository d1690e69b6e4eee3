"""ecotrack: carbon footprint calculation, aggregation and ranking.

Public API:
    calculate_footprint(category, subcategory, quantity) -- kg CO2 for an activity
    total / weekly_average / monthly_average / category_breakdown -- aggregates
    period_summary(records, now, period) -- stats over a reporting period
    get_suggestions(category) -- reduction tips
    rank_leaderboard(users) / user_ranking(user, users) -- competition ranking
    apply_activity / achievements / goal_progress -- gamification
"""

from ecotrack.aggregate import (
    category_breakdown,
    daily_average,
    monthly_average,
    period_summary,
    recompute_stats,
    select_records,
    total,
    weekly_average,
)
from ecotrack.calculator import (
    build_record,
    calculate_footprint,
    combine_components,
    round_footprint,
)
from ecotrack.core.models import (
    ActivityRecord,
    Category,
    CategoryStats,
    GoalProgress,
    LeaderboardEntry,
    PeriodSummary,
    Privacy,
    Suggestion,
    UserCarbonStats,
    UserProjection,
    UserRanking,
)
from ecotrack.factors import EmissionFactorTable, FactorVariant, build_factor_table
from ecotrack.gamification import (
    achievements,
    apply_activity,
    goal_progress,
    level_for,
    update_goal,
)
from ecotrack.leaderboard import (
    build_leaderboard,
    competition_ranks,
    my_ranking,
    percentile_for,
    rank_leaderboard,
    user_ranking,
)
from ecotrack.suggestions import get_suggestions

__all__ = [
    # Calculation
    "calculate_footprint",
    "build_record",
    "combine_components",
    "round_footprint",
    # Factors
    "EmissionFactorTable",
    "FactorVariant",
    "build_factor_table",
    # Aggregation
    "total",
    "daily_average",
    "weekly_average",
    "monthly_average",
    "category_breakdown",
    "period_summary",
    "recompute_stats",
    "select_records",
    # Suggestions
    "get_suggestions",
    # Ranking
    "competition_ranks",
    "rank_leaderboard",
    "build_leaderboard",
    "user_ranking",
    "my_ranking",
    "percentile_for",
    # Gamification
    "level_for",
    "apply_activity",
    "achievements",
    "goal_progress",
    "update_goal",
    # Types
    "ActivityRecord",
    "Category",
    "CategoryStats",
    "GoalProgress",
    "LeaderboardEntry",
    "PeriodSummary",
    "Privacy",
    "Suggestion",
    "UserCarbonStats",
    "UserProjection",
    "UserRanking",
]
