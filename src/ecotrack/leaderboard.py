"""Leaderboard ranking: lower total footprint ranks higher.

Ranks use competition ranking: tied totals share the rank of the first
entry of the tie block, and the next distinct total takes its 1-based
position, so ranks can skip (10, 10, 20, 30 -> 1, 1, 3, 4).
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from ecotrack.core.models import LeaderboardEntry, Privacy, UserProjection, UserRanking
from ecotrack.observability import LeaderboardRanked, emit


def competition_ranks(footprints: Sequence[float]) -> list[int]:
    """Competition ranks for totals already sorted ascending."""
    ranks: list[int] = []
    current_rank = 0
    previous: float | None = None
    for position, footprint in enumerate(footprints, start=1):
        if previous is None or footprint != previous:
            current_rank = position
        ranks.append(current_rank)
        previous = footprint
    return ranks


def rank_leaderboard(
    users: Iterable[UserProjection],
    limit: int | None = None,
) -> list[LeaderboardEntry]:
    """Order users by ascending total footprint and assign competition ranks.

    The sort is stable, so tied users keep their input order.
    """
    ordered = sorted(users, key=lambda u: u.total_footprint)
    if limit is not None:
        ordered = ordered[:limit]

    ranks = competition_ranks([u.total_footprint for u in ordered])
    entries = [
        LeaderboardEntry(
            rank=rank,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            total_footprint=user.stats.total_footprint,
            weekly_average=user.stats.weekly_average,
            monthly_average=user.stats.monthly_average,
            level=user.stats.level,
            goal=user.stats.goal,
        )
        for rank, user in zip(ranks, ordered)
    ]

    tie_count = sum(1 for i in range(1, len(ranks)) if ranks[i] == ranks[i - 1])
    emit(LeaderboardRanked(entry_count=len(entries), tie_count=tie_count))
    return entries


def percentile_for(rank: int, total_users: int) -> int:
    """(total - rank + 1) / total × 100, rounded half up. 0 with no users."""
    if total_users <= 0:
        return 0
    return math.floor((total_users - rank + 1) / total_users * 100 + 0.5)


def user_ranking(user: UserProjection, users: Sequence[UserProjection]) -> UserRanking:
    """Rank of one user against a population: 1 + users with a strictly lower total."""
    lower = sum(1 for other in users if other.total_footprint < user.total_footprint)
    rank = lower + 1
    total_users = len(users)
    return UserRanking(
        rank=rank,
        total_users=total_users,
        percentile=percentile_for(rank, total_users),
        total_footprint=user.stats.total_footprint,
        weekly_average=user.stats.weekly_average,
        monthly_average=user.stats.monthly_average,
    )


def public_users(users: Iterable[UserProjection]) -> list[UserProjection]:
    return [u for u in users if u.privacy == Privacy.PUBLIC]


def build_leaderboard(
    users: Iterable[UserProjection],
    limit: int | None = 10,
) -> list[LeaderboardEntry]:
    """Leaderboard over public users only, truncated to ``limit`` entries."""
    return rank_leaderboard(public_users(users), limit=limit)


def my_ranking(user: UserProjection, users: Iterable[UserProjection]) -> UserRanking:
    """Ranking of ``user`` among public users."""
    return user_ranking(user, public_users(users))
