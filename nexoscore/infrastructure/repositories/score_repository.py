"""PostgreSQL implementation of ScoreRepository."""

from typing import List

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nexoscore.domain.entities import ScoreSnapshot
from nexoscore.domain.interfaces import ScoreRepository
from nexoscore.infrastructure.database.models import (
    MerchantModel,
    ScoreSnapshotModel,
    to_naive_utc,
)

logger = structlog.get_logger(__name__)


class PostgresScoreRepository(ScoreRepository):
    """
    PostgreSQL implementation of the score store.

    ``save`` commits the snapshot insert and the merchant score update as
    one transaction, and rolls both back on failure.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, snapshot: ScoreSnapshot) -> ScoreSnapshot:
        """Persist a snapshot and move the merchant's current score."""
        model = ScoreSnapshotModel(
            id=snapshot.id,
            merchant_id=snapshot.merchant_id,
            score=snapshot.score,
            tier=snapshot.tier,
            components=snapshot.components,
            alerts=snapshot.alerts,
            credit_limit=snapshot.credit_limit,
            monthly_sales=snapshot.monthly_sales,
            created_at=snapshot.created_at,
        )

        try:
            self._session.add(model)
            merchant = await self._session.get(MerchantModel, snapshot.merchant_id)
            if merchant is not None:
                merchant.nexo_score = snapshot.score
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            logger.warning("score_snapshot_rolled_back", merchant_id=snapshot.merchant_id)
            raise

        return snapshot

    async def get_history(
        self,
        merchant_id: str,
        limit: int = 30,
    ) -> List[ScoreSnapshot]:
        """Retrieve snapshots ordered by created_at descending."""
        stmt = (
            select(ScoreSnapshotModel)
            .where(ScoreSnapshotModel.merchant_id == str(merchant_id))
            .order_by(ScoreSnapshotModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    def _to_entity(self, model: ScoreSnapshotModel) -> ScoreSnapshot:
        """Convert database model to domain entity."""
        return ScoreSnapshot(
            id=str(model.id),
            merchant_id=str(model.merchant_id),
            score=model.score,
            tier=model.tier,
            components=model.components or {},
            alerts=model.alerts or [],
            credit_limit=model.credit_limit,
            monthly_sales=model.monthly_sales,
            created_at=to_naive_utc(model.created_at),
        )
