"""
NexoScore Scoring Module
"""

from .models import AggregatedData, Alert, ComponentScore, ScoreResult
from .settings import (
    COMPONENT_CATEGORIES,
    COMPONENT_NAMES,
    DEFAULT_WEIGHTS,
    MAX_SCORE,
    ScoringSettings,
    TierDefinition,
    get_scoring_settings,
    scoring_settings,
)
from .score import calculate_nexo_score, round_half_up
from .tiers import calculate_credit_limit, classify_tier
from .alerts import ALERT_RULES, generate_alerts
from .engine import ScoringEngine

__all__ = [
    # Settings
    "ScoringSettings",
    "TierDefinition",
    "scoring_settings",
    "get_scoring_settings",
    "DEFAULT_WEIGHTS",
    "COMPONENT_NAMES",
    "COMPONENT_CATEGORIES",
    "MAX_SCORE",
    # Models
    "AggregatedData",
    "Alert",
    "ComponentScore",
    "ScoreResult",
    # Scoring
    "calculate_nexo_score",
    "round_half_up",
    "classify_tier",
    "calculate_credit_limit",
    "ALERT_RULES",
    "generate_alerts",
    # Engine
    "ScoringEngine",
]
