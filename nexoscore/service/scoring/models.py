"""
Data models for NexoScore computation.

These models represent the data structures used throughout the scoring
pipeline, from the aggregated merchant data to the final score result.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from nexoscore.domain.entities import (
    CustomerRelationship,
    Merchant,
    ReminderEvent,
    ScoreSnapshot,
    TransactionEvent,
)

from .settings import TierDefinition


@dataclass(frozen=True)
class ComponentScore:
    """
    Output of a single component calculator.

    Attributes:
        raw: The measured signal (count, ratio, list...), for explanation
        label: Human-readable summary of the raw value
        normalized: The signal rescaled to [0, 1] for weighting
    """

    raw: Any
    label: str
    normalized: float

    @classmethod
    def of(cls, raw: Any, label: str, normalized: float) -> "ComponentScore":
        """Build a component, clamping ``normalized`` into [0, 1]."""
        return cls(raw=raw, label=label, normalized=max(0.0, min(1.0, float(normalized))))

    def to_dict(self) -> dict:
        return {
            "raw": self.raw,
            "label": self.label,
            "normalized": self.normalized,
        }


@dataclass(frozen=True)
class Alert:
    """Qualitative alert attached to a score snapshot."""

    severity: str  # info, warning, critical
    code: str
    message: str

    def to_dict(self) -> dict:
        return {
            "type": self.severity,
            "code": self.code,
            "message": self.message,
        }


@dataclass
class AggregatedData:
    """
    Everything the calculators need about one merchant.

    Collections are empty, never None, when the datastore has nothing
    (or failed to answer) for that slice.

    Attributes:
        merchant: The merchant profile
        customers: All customer relationships
        transactions: Transactions from the trailing history window
        reminders: Most recent reminders
        intents: Intents recorded in the usage log
        as_of: Evaluation instant every window is anchored to (UTC)
    """

    merchant: Merchant
    as_of: datetime
    customers: List[CustomerRelationship] = field(default_factory=list)
    transactions: List[TransactionEvent] = field(default_factory=list)
    reminders: List[ReminderEvent] = field(default_factory=list)
    intents: List[str] = field(default_factory=list)


@dataclass
class ScoreResult:
    """
    The complete outcome of scoring one merchant.

    Attributes:
        merchant_id: Scored merchant
        score: NexoScore (0-1000)
        tier: Tier the score falls into
        components: Calculator outputs keyed by component name
        credit_limit: Suggested credit limit in minor units
        monthly_sales: Trailing 30-day sales in minor units
        alerts: Alerts derived from the components
        calculated_at: Evaluation instant
    """

    merchant_id: str
    score: int
    tier: TierDefinition
    components: Dict[str, ComponentScore]
    credit_limit: int
    monthly_sales: int
    alerts: List[Alert]
    calculated_at: datetime
    processing_time_ms: float = 0.0

    def component_breakdown(self) -> Dict[str, dict]:
        return {name: component.to_dict() for name, component in self.components.items()}

    def to_snapshot(self) -> ScoreSnapshot:
        """Convert to the immutable snapshot that gets persisted."""
        return ScoreSnapshot(
            merchant_id=self.merchant_id,
            score=self.score,
            tier=self.tier.grade,
            components=self.component_breakdown(),
            alerts=[alert.to_dict() for alert in self.alerts],
            credit_limit=self.credit_limit,
            monthly_sales=self.monthly_sales,
            created_at=self.calculated_at,
        )

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "merchant_id": self.merchant_id,
            "score": self.score,
            "tier": {
                "grade": self.tier.grade,
                "label": self.tier.label,
                "color": self.tier.color,
            },
            "components": self.component_breakdown(),
            "credit_limit": self.credit_limit,
            "monthly_sales": self.monthly_sales,
            "alerts": [alert.to_dict() for alert in self.alerts],
            "calculated_at": self.calculated_at.isoformat() + "Z",
            "processing_time_ms": round(self.processing_time_ms, 2),
        }
