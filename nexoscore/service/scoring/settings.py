"""
Scoring Settings for the NexoScore engine.

This module holds the fixed configuration of the scorer: the component
weight table, the tier table, the aggregation windows and the alert
thresholds. Settings are immutable once built and are passed to the
engine at construction, so alternate weight sets can be evaluated side by
side without touching shared state.

Environment variables use the SCORING_ prefix. Tables are JSON encoded:
    SCORING_WEIGHTS='{"tx_frequency": 0.12, ...}'
    SCORING_ALERT_LOW_ACTIVITY_THRESHOLD=0.3

Usage:
    from nexoscore.service.scoring.settings import scoring_settings

    # Or build an alternate configuration for testing
    custom = ScoringSettings(weights={...})
"""

from decimal import Decimal
from functools import lru_cache
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


MAX_SCORE = 1000

# Component weights grouped by category. Must sum to exactly 1.0.
DEFAULT_WEIGHTS: Dict[str, float] = {
    # Transactional data (0.40)
    "tx_frequency": 0.12,
    "tx_consistency": 0.10,
    "revenue_trend": 0.08,
    "avg_ticket": 0.05,
    "multi_currency": 0.05,
    # Collection behavior (0.25)
    "collection_ratio": 0.10,
    "avg_days_to_collect": 0.08,
    "delinquency_rate": 0.07,
    # Commercial network (0.20)
    "customer_diversity": 0.08,
    "customer_retention": 0.07,
    "network_validation": 0.05,
    # Engagement and identity (0.15)
    "days_active": 0.04,
    "identity_complete": 0.04,
    "feature_adoption": 0.04,
    "reminder_efficacy": 0.03,
}

COMPONENT_CATEGORIES: Dict[str, tuple[str, ...]] = {
    "transactional": (
        "tx_frequency",
        "tx_consistency",
        "revenue_trend",
        "avg_ticket",
        "multi_currency",
    ),
    "collection": (
        "collection_ratio",
        "avg_days_to_collect",
        "delinquency_rate",
    ),
    "network": (
        "customer_diversity",
        "customer_retention",
        "network_validation",
    ),
    "engagement": (
        "days_active",
        "identity_complete",
        "feature_adoption",
        "reminder_efficacy",
    ),
}

COMPONENT_NAMES: tuple[str, ...] = tuple(DEFAULT_WEIGHTS)


class TierDefinition(BaseModel):
    """One risk band of the tier table."""

    model_config = ConfigDict(frozen=True)

    grade: str = Field(..., min_length=1, max_length=2)
    min_score: int = Field(..., ge=0, le=MAX_SCORE)
    label: str
    color: str
    credit_factor: float = Field(..., ge=0.0, le=1.0)

    def to_dict(self) -> dict:
        return {
            "grade": self.grade,
            "min": self.min_score,
            "label": self.label,
            "color": self.color,
            "credit_factor": self.credit_factor,
        }


def _default_tiers() -> List[TierDefinition]:
    return [
        TierDefinition(grade="A", min_score=750, label="Excellent", color="#00D2A0", credit_factor=0.30),
        TierDefinition(grade="B", min_score=600, label="Good", color="#48DBFB", credit_factor=0.20),
        TierDefinition(grade="C", min_score=450, label="Fair", color="#FECA57", credit_factor=0.10),
        TierDefinition(grade="D", min_score=300, label="Low", color="#FF9F43", credit_factor=0.05),
        TierDefinition(grade="F", min_score=0, label="No Score", color="#FF6B6B", credit_factor=0.0),
    ]


class ScoringSettings(BaseSettings):
    """
    Configurable parameters for the NexoScore algorithm.

    All settings can be overridden via environment variables with the
    SCORING_ prefix. Instances are frozen.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # === Weight and Tier Tables ===
    weights: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_WEIGHTS),
        description="Weight per component; keys must match the component set",
    )
    tiers: List[TierDefinition] = Field(
        default_factory=_default_tiers,
        description="Tiers ordered by strictly decreasing min_score, ending at 0",
    )

    # === Aggregation Windows ===
    window_days: int = Field(
        default=30,
        gt=0,
        description="Length of the trailing (and prior) comparison window in days",
    )
    history_days: int = Field(
        default=90,
        gt=0,
        description="Transaction history fetched for scoring, in days",
    )
    weeks_per_window: float = Field(
        default=4.3,
        gt=0.0,
        description="Weeks in the trailing window, used for tx/week",
    )
    min_consistency_transactions: int = Field(
        default=5,
        ge=1,
        description="Below this many tx in the window consistency is not computed",
    )
    reminder_effect_days: int = Field(
        default=7,
        gt=0,
        description="Days after a reminder within which a payment counts as effective",
    )

    # === Alert Thresholds (on normalized components) ===
    alert_revenue_decline_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    alert_low_collection_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    alert_high_delinquency_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    alert_low_activity_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    alert_incomplete_profile_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    @field_validator("weights")
    @classmethod
    def validate_weights(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Weights must cover every component and sum to exactly 1.0."""
        missing = set(COMPONENT_NAMES) - set(v)
        unknown = set(v) - set(COMPONENT_NAMES)
        if missing or unknown:
            raise ValueError(
                f"Weight table mismatch (missing={sorted(missing)}, unknown={sorted(unknown)})"
            )
        for name, weight in v.items():
            if not 0.0 <= weight <= 1.0:
                raise ValueError(f"Weight for {name} out of range: {weight}")

        total = sum(Decimal(str(weight)) for weight in v.values())
        if total != Decimal("1"):
            raise ValueError(f"Weights must sum to 1.0, got {total}")

        return {name: v[name] for name in COMPONENT_NAMES}

    @field_validator("tiers")
    @classmethod
    def validate_tiers(cls, v: List[TierDefinition]) -> List[TierDefinition]:
        """Tier thresholds must be strictly decreasing and reach 0."""
        if not v:
            raise ValueError("At least one tier is required")

        thresholds = [tier.min_score for tier in v]
        for higher, lower in zip(thresholds, thresholds[1:]):
            if lower >= higher:
                raise ValueError(
                    f"Tier thresholds must be strictly decreasing: {thresholds}"
                )
        if thresholds[-1] != 0:
            raise ValueError("The lowest tier must start at 0")

        grades = [tier.grade for tier in v]
        if len(set(grades)) != len(grades):
            raise ValueError(f"Tier grades must be unique: {grades}")

        return v

    @property
    def total_weight(self) -> Decimal:
        """Exact sum of the weight table."""
        return sum((Decimal(str(w)) for w in self.weights.values()), Decimal("0"))

    def category_weight(self, category: str) -> Decimal:
        """Exact sum of the weights of one category."""
        return sum(
            (Decimal(str(self.weights[name])) for name in COMPONENT_CATEGORIES[category]),
            Decimal("0"),
        )


@lru_cache
def get_scoring_settings() -> ScoringSettings:
    """Get cached scoring settings instance."""
    return ScoringSettings()


scoring_settings = get_scoring_settings()
