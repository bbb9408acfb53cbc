"""Leaderboard aggregation for pointrank.

Pure functions that fold point-earning achievements into per-user totals and
rank them. No I/O and no state is kept between calls: a caller that wants
incremental updates passes the previous leaderboard back in.
"""
from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pointrank.errors import InvalidAchievement, InvalidInputShape, InvalidLeaderboardEntry

logger = logging.getLogger(__name__)

# Seeded users start here so that any new achievement replaces it.
EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Achievement:
    user_id: str
    points: float
    date: datetime


@dataclass(frozen=True)
class LeaderboardEntry:
    user_id: str
    points: float

    def to_dict(self) -> dict:
        return {"userId": self.user_id, "points": self.points}

    @classmethod
    def from_dict(cls, data: dict) -> LeaderboardEntry:
        user_id = data.get("userId", data.get("user_id"))
        return cls(user_id=user_id, points=data.get("points"))


@dataclass
class UserAggregate:
    user_id: str
    total_points: float = 0
    latest_date: datetime = EPOCH


Leaderboard = list[LeaderboardEntry]


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def check_sequence(value: Any, name: str) -> None:
    """Raise InvalidInputShape unless value is a list-like sequence."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidInputShape(f"Invalid input: {name} must be a sequence, got {type(value).__name__}")


def validate_achievement(achievement: Any) -> bool:
    """Return True if the achievement has a usable user id, points and date.

    Negative and zero points are allowed; NaN and infinities are not.
    """
    user_id = getattr(achievement, "user_id", None)
    if not isinstance(user_id, str) or not user_id.strip():
        return False
    if not _is_finite_number(getattr(achievement, "points", None)):
        return False
    return isinstance(getattr(achievement, "date", None), datetime)


def validate_entry(entry: Any) -> bool:
    """Return True if a previous-leaderboard entry can seed an aggregate."""
    user_id = getattr(entry, "user_id", None)
    if not isinstance(user_id, str) or not user_id.strip():
        return False
    return _is_finite_number(getattr(entry, "points", None))


def seed_totals(previous: Sequence[LeaderboardEntry] | None) -> dict[str, float]:
    """Collapse a previous leaderboard into user_id -> points, keeping its order.

    Repeated user ids are summed.
    """
    totals: dict[str, float] = {}
    if previous is None:
        return totals
    check_sequence(previous, "previous")
    for i, entry in enumerate(previous):
        if not validate_entry(entry):
            raise InvalidLeaderboardEntry(i, entry)
        totals[entry.user_id] = totals.get(entry.user_id, 0) + entry.points
    return totals


def calculate_leaderboard(
    achievements: Sequence[Achievement],
    previous: Sequence[LeaderboardEntry] | None = None,
) -> Leaderboard:
    """Aggregate achievements by user and rank users by total points.

    Ties on points go to the user whose latest contributing achievement is
    earliest. Users seeded from previous start at EPOCH, so a seeded user with
    no new activity outranks an active user on equal points. Users tied on
    both points and date keep insertion order: previous order first, then
    first appearance in achievements.

    Raises InvalidInputShape if achievements is not a sequence and
    InvalidAchievement at the first malformed achievement.
    """
    check_sequence(achievements, "achievements")

    users: dict[str, UserAggregate] = {
        user_id: UserAggregate(user_id, points) for user_id, points in seed_totals(previous).items()
    }
    seeded = len(users)

    for i, achievement in enumerate(achievements):
        if not validate_achievement(achievement):
            raise InvalidAchievement(i, achievement)
        aggregate = users.get(achievement.user_id)
        if aggregate is None:
            aggregate = users[achievement.user_id] = UserAggregate(achievement.user_id)
        aggregate.total_points += achievement.points
        date = _as_utc(achievement.date)
        if date > aggregate.latest_date:
            aggregate.latest_date = date

    ranked = sorted(users.values(), key=lambda a: (-a.total_points, a.latest_date))
    logger.debug(
        "Ranked %d users (%d seeded) from %d achievements", len(ranked), seeded, len(achievements)
    )
    return [LeaderboardEntry(a.user_id, a.total_points) for a in ranked]
