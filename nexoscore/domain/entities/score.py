"""ScoreSnapshot entity: one immutable record of a full score computation."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4


@dataclass(frozen=True)
class ScoreSnapshot:
    """
    Append-only historical record of a NexoScore computation.

    Snapshots are never mutated. The most recent snapshot is the source of
    the merchant's current score; consecutive snapshots give the trend.

    Attributes:
        merchant_id: Scored merchant
        score: NexoScore (0-1000)
        tier: Tier grade (A-F) at computation time
        components: Per-component breakdown ``{name: {raw, label, normalized}}``
        alerts: Alerts raised by the computation
        credit_limit: Suggested credit limit in minor units
        monthly_sales: Trailing 30-day sales in minor units
    """

    merchant_id: str
    score: int
    tier: str
    components: dict[str, dict[str, Any]]
    alerts: list[dict[str, str]]
    credit_limit: int
    monthly_sales: int
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "merchant_id": self.merchant_id,
            "score": self.score,
            "tier": self.tier,
            "components": self.components,
            "alerts": self.alerts,
            "credit_limit": self.credit_limit,
            "monthly_sales": self.monthly_sales,
            "created_at": self.created_at.isoformat() + "Z",
        }
