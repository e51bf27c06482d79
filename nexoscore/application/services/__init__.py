"""Application services (use cases)."""

from .batch_runner import BatchRunner, BatchState
from .data_aggregator import DataAggregator
from .lookup_service import LookupService
from .scoring_service import ScoringService

__all__ = [
    "BatchRunner",
    "BatchState",
    "DataAggregator",
    "LookupService",
    "ScoringService",
]
