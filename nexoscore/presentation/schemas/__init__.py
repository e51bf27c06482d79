"""Pydantic schemas for API request/response validation."""

from .error import ErrorResponseSchema
from .score import (
    AlertSchema,
    BatchStatusSchema,
    BatchSummarySchema,
    ComponentSchema,
    DistributionSchema,
    HistoryPointSchema,
    LeaderboardEntrySchema,
    LeaderboardSchema,
    ScoreLookupSchema,
    ScoreResultSchema,
)

__all__ = [
    "AlertSchema",
    "BatchStatusSchema",
    "BatchSummarySchema",
    "ComponentSchema",
    "DistributionSchema",
    "ErrorResponseSchema",
    "HistoryPointSchema",
    "LeaderboardEntrySchema",
    "LeaderboardSchema",
    "ScoreLookupSchema",
    "ScoreResultSchema",
]
