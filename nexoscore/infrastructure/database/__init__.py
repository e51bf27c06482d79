"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager, db_manager
from .models import (
    Base,
    CustomerModel,
    MerchantModel,
    MessageLogModel,
    ReminderModel,
    ScoreSnapshotModel,
    TransactionModel,
    to_naive_utc,
)

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "MerchantModel",
    "CustomerModel",
    "TransactionModel",
    "ReminderModel",
    "MessageLogModel",
    "ScoreSnapshotModel",
    "to_naive_utc",
]
