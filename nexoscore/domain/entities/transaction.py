"""Transaction entity logged from merchant messages."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4


class TransactionType(str, Enum):
    """Closed set of transaction kinds produced by the message parser."""

    SALE_CASH = "SALE_CASH"
    SALE_CREDIT = "SALE_CREDIT"  # Fiado
    PAYMENT = "PAYMENT"  # Customer paying down fiado
    INVENTORY_IN = "INVENTORY_IN"
    EXPENSE = "EXPENSE"


SALE_TYPES = frozenset({TransactionType.SALE_CASH, TransactionType.SALE_CREDIT})


@dataclass(frozen=True)
class TransactionEvent:
    """
    Immutable, append-only transaction record.

    Attributes:
        type: Kind of transaction
        amount: Amount in minor units of ``currency``
        created_at: When the transaction was logged (UTC)
        currency: ISO currency code
        customer_id: Customer involved, if any
    """

    type: TransactionType
    amount: int
    created_at: datetime
    currency: str = "PYG"
    customer_id: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def is_sale(self) -> bool:
        return self.type in SALE_TYPES

    @property
    def is_payment(self) -> bool:
        return self.type == TransactionType.PAYMENT
