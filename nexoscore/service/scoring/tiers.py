"""
Tier Classification and Credit Limit for the NexoScore engine.

Maps a score to its risk tier and derives the suggested credit limit from
the tier's credit factor and the merchant's monthly sales.
"""

from .score import round_half_up
from .settings import ScoringSettings, TierDefinition, scoring_settings


def classify_tier(
    score: int,
    settings: ScoringSettings = scoring_settings,
) -> TierDefinition:
    """
    Return the first tier (highest threshold first) the score reaches.

    Scores below every threshold fall into the last tier.
    """
    for tier in settings.tiers:
        if score >= tier.min_score:
            return tier
    return settings.tiers[-1]


def calculate_credit_limit(monthly_sales: int, tier: TierDefinition) -> int:
    """
    Suggested credit limit in minor units.

    Args:
        monthly_sales: Trailing 30-day sales in minor units
        tier: Tier the merchant's score falls into

    Returns:
        round_half_up(monthly_sales * credit_factor), never negative
    """
    return max(0, round_half_up(monthly_sales * tier.credit_factor))
