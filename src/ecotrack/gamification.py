"""Experience, levels, achievements and goal progress.

Experience grows by the whole kg CO2 of each logged activity; every 100
points is a level. Level is derived from the experience held *before* the
activity being applied, so it trails experience by one activity.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta

from ecotrack.aggregate import recompute_stats, total
from ecotrack.core.models import ActivityRecord, GoalProgress, UserCarbonStats

XP_PER_LEVEL = 100

# Achievement names
FIRST_STEPS = "First Steps"
DEDICATED_TRACKER = "Dedicated Tracker"
CARBON_WARRIOR = "Carbon Warrior"
LOW_CARBON_HERO = "Low Carbon Hero"
WELL_ROUNDED = "Well Rounded"
MASTER_TRACKER = "Master Tracker"
WEEKLY_WARRIOR = "Weekly Warrior"


def level_for(experience: int) -> int:
    return experience // XP_PER_LEVEL + 1


def apply_activity(
    stats: UserCarbonStats,
    record: ActivityRecord,
    records: Sequence[ActivityRecord],
    now: datetime,
) -> UserCarbonStats:
    """Stats after logging ``record``; ``records`` must already include it."""
    updated = recompute_stats(records, now, stats)
    return replace(
        updated,
        experience=stats.experience + math.floor(record.footprint),
        level=level_for(stats.experience),
    )


def achievements(records: Sequence[ActivityRecord], now: datetime) -> list[str]:
    """Achievement names earned by a record set, in a fixed order."""
    count = len(records)
    footprint = total(records)
    categories = {r.category for r in records}
    week_ago = now - timedelta(days=7)
    weekly_count = sum(1 for r in records if r.timestamp >= week_ago)

    earned: list[str] = []
    if count >= 10:
        earned.append(FIRST_STEPS)
    if count >= 50:
        earned.append(DEDICATED_TRACKER)
    if count >= 100:
        earned.append(CARBON_WARRIOR)
    if footprint < 1000:
        earned.append(LOW_CARBON_HERO)
    if len(categories) >= 3:
        earned.append(WELL_ROUNDED)
    if len(categories) >= 5:
        earned.append(MASTER_TRACKER)
    if weekly_count >= 7:
        earned.append(WEEKLY_WARRIOR)
    return earned


def goal_progress(stats: UserCarbonStats) -> GoalProgress:
    """Share of the yearly goal used so far, in percent, capped at 100."""
    progress = min(stats.total_footprint / stats.goal * 100, 100.0) if stats.goal > 0 else 100.0
    return GoalProgress(
        goal=stats.goal,
        current=stats.total_footprint,
        progress=progress,
        weekly_progress=stats.weekly_average,
        monthly_progress=stats.monthly_average,
        level=stats.level,
        experience=stats.experience,
    )


def update_goal(stats: UserCarbonStats, goal: float | None) -> UserCarbonStats:
    """Set a new goal; missing or non-positive goals leave stats unchanged."""
    if goal and goal > 0:
        return replace(stats, goal=goal)
    return stats
