"""Exceptions raised by the pointrank aggregator."""

from __future__ import annotations

from typing import Any


class LeaderboardError(ValueError):
    """Base class for every failure raised while computing a leaderboard."""


class InvalidInputShape(LeaderboardError, TypeError):
    """The achievements (or previous leaderboard) argument is not a sequence."""


class InvalidAchievement(LeaderboardError):
    """An achievement failed validation. Nothing is aggregated for the batch."""

    def __init__(self, index: int, achievement: Any):
        self.index = index
        self.achievement = achievement
        super().__init__(f"Invalid achievement at index {index}: {achievement!r}")


class InvalidLeaderboardEntry(LeaderboardError):
    """An entry of the previous leaderboard has no user id or non-finite points."""

    def __init__(self, index: int, entry: Any):
        self.index = index
        self.entry = entry
        super().__init__(f"Invalid leaderboard entry at index {index}: {entry!r}")
