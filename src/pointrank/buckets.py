"""Bucket-by-points leaderboard strategy.

Keeps a live index of points -> users, moving a user between buckets on every
achievement instead of sorting once at the end. Within a bucket, users are in
the order they reached that total, so ties go to whoever got there first in
input order. Achievement dates are validated but never compared.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from pointrank.errors import InvalidAchievement
from pointrank.leaderboard import (
    Achievement,
    Leaderboard,
    LeaderboardEntry,
    calculate_leaderboard,
    check_sequence,
    seed_totals,
    validate_achievement,
)

logger = logging.getLogger(__name__)


def _move(buckets: dict[float, dict[str, None]], user_id: str, old: float | None, new: float) -> None:
    if old is not None:
        bucket = buckets[old]
        del bucket[user_id]
        if not bucket:
            del buckets[old]
    # dict keys double as an insertion-ordered set
    buckets.setdefault(new, {})[user_id] = None


def calculate_leaderboard_by_buckets(
    achievements: Sequence[Achievement],
    previous: Sequence[LeaderboardEntry] | None = None,
) -> Leaderboard:
    """Rank users by total points, breaking ties by order of reaching the total.

    Same inputs, validation and errors as calculate_leaderboard.
    """
    check_sequence(achievements, "achievements")

    totals = seed_totals(previous)
    buckets: dict[float, dict[str, None]] = {}
    for user_id, points in totals.items():
        _move(buckets, user_id, None, points)

    for i, achievement in enumerate(achievements):
        if not validate_achievement(achievement):
            raise InvalidAchievement(i, achievement)
        old = totals.get(achievement.user_id)
        new = (old or 0) + achievement.points
        totals[achievement.user_id] = new
        _move(buckets, achievement.user_id, old, new)

    logger.debug("Bucketed %d users into %d point totals", len(totals), len(buckets))
    return [
        LeaderboardEntry(user_id, points)
        for points in sorted(buckets, reverse=True)
        for user_id in buckets[points]
    ]


STRATEGY_FUNCS = {
    "latest-date": calculate_leaderboard,
    "buckets": calculate_leaderboard_by_buckets,
}
