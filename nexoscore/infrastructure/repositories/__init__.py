"""Repository implementations."""

from .activity_repository import PostgresActivityRepository
from .merchant_repository import PostgresMerchantDirectory, PostgresMerchantRepository
from .score_repository import PostgresScoreRepository

__all__ = [
    "PostgresActivityRepository",
    "PostgresMerchantDirectory",
    "PostgresMerchantRepository",
    "PostgresScoreRepository",
]
