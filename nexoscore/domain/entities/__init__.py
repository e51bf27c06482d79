"""Domain Entities - Core business objects."""

from .customer import CustomerRelationship, RiskLevel
from .merchant import Merchant, MerchantStatus
from .reminder import ReminderEvent, ReminderStatus
from .score import ScoreSnapshot
from .transaction import SALE_TYPES, TransactionEvent, TransactionType

__all__ = [
    "CustomerRelationship",
    "RiskLevel",
    "Merchant",
    "MerchantStatus",
    "ReminderEvent",
    "ReminderStatus",
    "ScoreSnapshot",
    "SALE_TYPES",
    "TransactionEvent",
    "TransactionType",
]
