"""Customer relationship entity (one row per merchant-customer pair)."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class CustomerRelationship:
    """
    Running totals for a customer of a merchant.

    Maintained incrementally by the transaction-logging flow; the scoring
    engine only reads it.

    Attributes:
        merchant_id: Owning merchant
        name: Customer name as the merchant refers to them
        phone: Customer phone, used for cross-merchant validation
        total_debt: Outstanding credit (fiado) in minor units
        total_paid: Credit already collected in minor units
        total_transactions: Number of transactions with this customer
        avg_days_to_pay: Average days between credit sale and payment
        risk_level: Derived collection risk
        last_transaction_at: Most recent activity with this customer
    """

    merchant_id: str
    name: str
    id: str = field(default_factory=lambda: str(uuid4()))
    phone: Optional[str] = None
    total_debt: int = 0
    total_paid: int = 0
    total_transactions: int = 0
    avg_days_to_pay: float = 0.0
    risk_level: RiskLevel = RiskLevel.LOW
    last_transaction_at: Optional[datetime] = None

    @property
    def is_high_risk(self) -> bool:
        return self.risk_level == RiskLevel.HIGH
