"""Tests for ecotrack.gamification -- experience, levels, achievements, goals."""

from __future__ import annotations

import pytest
from conftest import NOW, make_record

from ecotrack.core.models import Category, UserCarbonStats
from ecotrack.gamification import (
    CARBON_WARRIOR,
    DEDICATED_TRACKER,
    FIRST_STEPS,
    LOW_CARBON_HERO,
    MASTER_TRACKER,
    WEEKLY_WARRIOR,
    WELL_ROUNDED,
    achievements,
    apply_activity,
    goal_progress,
    level_for,
    update_goal,
)


class TestLevels:
    @pytest.mark.parametrize(
        ("experience", "level"), [(0, 1), (99, 1), (100, 2), (250, 3), (1000, 11)]
    )
    def test_level_for(self, experience, level):
        assert level_for(experience) == level


class TestApplyActivity:
    """Experience grows by whole kg; level follows the previous experience."""

    def test_adds_floor_of_footprint(self):
        record = make_record(26.6)
        stats = apply_activity(UserCarbonStats(experience=10), record, [record], NOW)
        assert stats.experience == 36

    def test_level_trails_experience(self):
        first = make_record(26.6)
        stats = apply_activity(UserCarbonStats(experience=95), first, [first], NOW)
        assert stats.experience == 121
        assert stats.level == 1

        second = make_record(1.0)
        stats = apply_activity(stats, second, [first, second], NOW)
        assert stats.experience == 122
        assert stats.level == 2

    def test_recomputes_totals(self):
        records = [make_record(14.0, days_ago=2), make_record(7.0)]
        stats = apply_activity(UserCarbonStats(goal=500.0), records[-1], records, NOW)
        assert stats.total_footprint == 21.0
        assert stats.goal == 500.0

    def test_zero_footprint_adds_nothing(self):
        record = make_record(0.4)
        stats = apply_activity(UserCarbonStats(experience=7), record, [record], NOW)
        assert stats.experience == 7


class TestAchievements:
    def test_empty_is_low_carbon_hero(self):
        assert achievements([], NOW) == [LOW_CARBON_HERO]

    def test_first_steps_and_weekly_warrior(self):
        records = [make_record(1.0, days_ago=i * 0.5) for i in range(10)]
        assert achievements(records, NOW) == [FIRST_STEPS, LOW_CARBON_HERO, WEEKLY_WARRIOR]

    def test_weekly_warrior_needs_recent_activity(self):
        records = [make_record(1.0, days_ago=10 + i) for i in range(10)]
        assert WEEKLY_WARRIOR not in achievements(records, NOW)

    def test_count_thresholds(self):
        records = [make_record(1.0, days_ago=30) for _ in range(100)]
        earned = achievements(records, NOW)
        assert {FIRST_STEPS, DEDICATED_TRACKER, CARBON_WARRIOR} <= set(earned)

    def test_heavy_footprint_loses_hero(self):
        assert LOW_CARBON_HERO not in achievements([make_record(1000.0)], NOW)

    def test_category_variety(self):
        cats = [Category.FOOD, Category.TRANSPORT, Category.WASTE]
        three = [make_record(1.0, category=c) for c in cats]
        assert WELL_ROUNDED in achievements(three, NOW)
        assert MASTER_TRACKER not in achievements(three, NOW)

        five = three + [
            make_record(1.0, category=Category.SHOPPING),
            make_record(1.0, category=Category.ELECTRICITY),
        ]
        assert MASTER_TRACKER in achievements(five, NOW)


class TestGoalProgress:
    def test_percent_of_goal(self):
        progress = goal_progress(UserCarbonStats(total_footprint=500.0, goal=2000.0))
        assert progress.progress == 25.0
        assert progress.current == 500.0
        assert progress.goal == 2000.0

    def test_capped_at_hundred(self):
        assert goal_progress(UserCarbonStats(total_footprint=3000.0)).progress == 100.0

    def test_zero_goal(self):
        assert goal_progress(UserCarbonStats(total_footprint=1.0, goal=0.0)).progress == 100.0

    def test_carries_averages_and_level(self):
        stats = UserCarbonStats(weekly_average=3.0, monthly_average=12.0, level=2, experience=150)
        progress = goal_progress(stats)
        assert progress.weekly_progress == 3.0
        assert progress.monthly_progress == 12.0
        assert (progress.level, progress.experience) == (2, 150)


class TestUpdateGoal:
    def test_sets_goal(self):
        assert update_goal(UserCarbonStats(), 1500.0).goal == 1500.0

    @pytest.mark.parametrize("goal", [None, 0, -5.0])
    def test_ignores_missing_or_non_positive(self, goal):
        stats = UserCarbonStats(goal=1200.0)
        assert update_goal(stats, goal) is stats
