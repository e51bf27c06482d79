"""
Weighted Scorer for the NexoScore engine.

Combines the normalized components into a single 0-1000 score using the
weight table from the scoring settings.
"""

import math
from typing import Mapping

from .models import ComponentScore
from .settings import MAX_SCORE, ScoringSettings, scoring_settings


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return int(math.floor(value + 0.5))


def calculate_nexo_score(
    components: Mapping[str, ComponentScore],
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Calculate the NexoScore from component outputs.

    score = round_half_up(1000 * sum(weight * normalized))

    A component missing from ``components`` contributes 0.

    Args:
        components: Calculator outputs keyed by component name
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        NexoScore from 0-1000
    """
    weighted = 0.0
    for name, weight in settings.weights.items():
        component = components.get(name)
        if component is None:
            continue
        weighted += weight * component.normalized

    score = round_half_up(weighted * MAX_SCORE)
    return max(0, min(MAX_SCORE, score))
