"""Scoring service - orchestrates the single-merchant scoring use case."""

from datetime import datetime
from typing import Optional

import structlog

from nexoscore.core.metrics import (
    record_calculation,
    record_persist_failure,
    track_calculation_latency,
)
from nexoscore.domain.interfaces import ScoreRepository
from nexoscore.service.scoring import ScoreResult, ScoringEngine

from .data_aggregator import DataAggregator

logger = structlog.get_logger(__name__)


class ScoringService:
    """
    Application service for scoring one merchant.

    Pipeline: aggregate -> components -> score -> tier -> credit limit
    -> alerts -> persist.
    """

    def __init__(
        self,
        aggregator: DataAggregator,
        score_repository: ScoreRepository,
        engine: ScoringEngine,
    ):
        self._aggregator = aggregator
        self._score_repo = score_repository
        self._engine = engine

    async def calculate_score(
        self,
        merchant_id: str,
        as_of: Optional[datetime] = None,
    ) -> Optional[ScoreResult]:
        """
        Compute, persist and return the NexoScore of a merchant.

        A failure to persist is logged and counted, and the computed
        result is still returned.

        Args:
            merchant_id: The merchant to score
            as_of: Evaluation instant (UTC), defaults to now

        Returns:
            The score result, or None if the merchant does not exist
        """
        log = logger.bind(merchant_id=merchant_id)

        with track_calculation_latency():
            data = await self._aggregator.aggregate(merchant_id, as_of=as_of)
            if data is None:
                return None

            result = await self._engine.score(data)

        record_calculation(result.score, result.tier.grade)

        try:
            await self._score_repo.save(result.to_snapshot())
        except Exception as e:
            log.error("score_persist_failed", error=str(e), score=result.score)
            record_persist_failure()

        log.info(
            "score_calculated",
            score=result.score,
            tier=result.tier.grade,
            credit_limit=result.credit_limit,
            alerts=[alert.code for alert in result.alerts],
            processing_time_ms=round(result.processing_time_ms, 2),
        )

        return result
