"""Data Transfer Objects for application layer."""

from .score import (
    BatchSummary,
    HistoryPoint,
    LeaderboardEntry,
    ScoreDistribution,
    ScoreLookup,
)

__all__ = [
    "BatchSummary",
    "HistoryPoint",
    "LeaderboardEntry",
    "ScoreDistribution",
    "ScoreLookup",
]
