"""
Domain Interfaces (Ports)
"""

from .clients import MerchantDirectory
from .repositories import ActivityRepository, MerchantRepository, ScoreRepository
from .scheduler import Job, Scheduler

__all__ = [
    "MerchantRepository",
    "ActivityRepository",
    "ScoreRepository",
    "MerchantDirectory",
    "Scheduler",
    "Job",
]
