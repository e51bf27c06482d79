"""
Scoring Engine for the NexoScore.

This module orchestrates the scoring of one merchant:
1. Run every component calculator over the aggregated data
2. Combine the components into the weighted 0-1000 score
3. Classify the score into a tier and derive the credit limit
4. Generate alerts from the components

The engine holds no mutable state. Its settings are fixed at construction,
so two engines with different weight tables can score the same data side
by side.
"""

import time
from typing import Callable, Dict, Optional

from nexoscore.domain.interfaces import MerchantDirectory

from .alerts import generate_alerts
from .collection import (
    calculate_avg_days_to_collect,
    calculate_collection_ratio,
    calculate_delinquency_rate,
)
from .engagement import (
    calculate_days_active,
    calculate_feature_adoption,
    calculate_identity_complete,
    calculate_reminder_efficacy,
)
from .models import AggregatedData, ComponentScore, ScoreResult
from .network import (
    calculate_customer_diversity,
    calculate_customer_retention,
    calculate_network_validation,
)
from .score import calculate_nexo_score
from .settings import ScoringSettings, scoring_settings
from .tiers import calculate_credit_limit, classify_tier
from .transactional import (
    calculate_avg_ticket,
    calculate_multi_currency,
    calculate_revenue_trend,
    calculate_tx_consistency,
    calculate_tx_frequency,
)
from .windows import monthly_sales

Calculator = Callable[[AggregatedData, ScoringSettings], ComponentScore]

# network_validation is asynchronous and is run separately by the engine
SYNC_CALCULATORS: Dict[str, Calculator] = {
    "tx_frequency": calculate_tx_frequency,
    "tx_consistency": calculate_tx_consistency,
    "revenue_trend": calculate_revenue_trend,
    "avg_ticket": calculate_avg_ticket,
    "multi_currency": calculate_multi_currency,
    "collection_ratio": calculate_collection_ratio,
    "avg_days_to_collect": calculate_avg_days_to_collect,
    "delinquency_rate": calculate_delinquency_rate,
    "customer_diversity": calculate_customer_diversity,
    "customer_retention": calculate_customer_retention,
    "days_active": calculate_days_active,
    "identity_complete": calculate_identity_complete,
    "feature_adoption": calculate_feature_adoption,
    "reminder_efficacy": calculate_reminder_efficacy,
}


class ScoringEngine:
    """
    Computes the NexoScore of a merchant from its aggregated data.

    Args:
        settings: Weight table, tier table, windows and alert thresholds
        directory: Registered-merchant lookup for network validation
        network_timeout: Seconds the network lookup may take
    """

    def __init__(
        self,
        settings: ScoringSettings = scoring_settings,
        directory: Optional[MerchantDirectory] = None,
        network_timeout: float = 3.0,
    ):
        self.settings = settings
        self.directory = directory
        self.network_timeout = network_timeout

    async def calculate_components(self, data: AggregatedData) -> Dict[str, ComponentScore]:
        """Run all fifteen calculators, in weight-table order."""
        components = {
            name: calculator(data, self.settings)
            for name, calculator in SYNC_CALCULATORS.items()
        }
        components["network_validation"] = await calculate_network_validation(
            data, self.directory, self.network_timeout
        )
        return {
            name: components[name]
            for name in self.settings.weights
            if name in components
        }

    def evaluate(
        self,
        data: AggregatedData,
        components: Dict[str, ComponentScore],
    ) -> ScoreResult:
        """
        Turn component outputs into a full score result.

        Pure with respect to its inputs: the same data and components
        always give the same result.
        """
        score = calculate_nexo_score(components, self.settings)
        tier = classify_tier(score, self.settings)
        sales = monthly_sales(data.transactions, data.as_of, self.settings.window_days)

        return ScoreResult(
            merchant_id=data.merchant.id,
            score=score,
            tier=tier,
            components=components,
            credit_limit=calculate_credit_limit(sales, tier),
            monthly_sales=sales,
            alerts=generate_alerts(components, self.settings),
            calculated_at=data.as_of,
        )

    async def score(self, data: AggregatedData) -> ScoreResult:
        """Calculate components and evaluate them into a score result."""
        start = time.perf_counter()
        components = await self.calculate_components(data)
        result = self.evaluate(data, components)
        result.processing_time_ms = (time.perf_counter() - start) * 1000
        return result
