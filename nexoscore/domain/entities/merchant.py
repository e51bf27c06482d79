"""Merchant entity representing a registered business."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4


class MerchantStatus(str, Enum):
    """Lifecycle status of a merchant. Merchants are deactivated, never deleted."""

    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Merchant:
    """
    A merchant registered on the messaging service.

    Profile fields are captured during onboarding and feed the identity
    completeness component. ``current_score`` always mirrors the most
    recent persisted snapshot and is only written by the score store.
    """

    phone: str
    id: str = field(default_factory=lambda: str(uuid4()))
    national_id: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    business_name: Optional[str] = None
    business_type: str = "general"
    monthly_volume: Optional[str] = None
    onboarded_at: Optional[datetime] = None
    current_score: int = 0
    status: MerchantStatus = MerchantStatus.ACTIVE
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == MerchantStatus.ACTIVE

    def public_profile(self) -> dict:
        """Limited profile shared with third-party risk lookups."""
        return {
            "name": self.name,
            "business_name": self.business_name,
            "city": self.city,
            "business_type": self.business_type,
            "member_since": self.created_at.isoformat() + "Z",
        }
