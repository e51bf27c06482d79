"""Collection reminder entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4


class ReminderStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class ReminderEvent:
    """A collection reminder sent (or scheduled) to a merchant's customer."""

    customer_id: str
    amount: int
    status: ReminderStatus = ReminderStatus.PENDING
    sent_at: Optional[datetime] = None
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def was_sent(self) -> bool:
        return self.status == ReminderStatus.SENT and self.sent_at is not None
