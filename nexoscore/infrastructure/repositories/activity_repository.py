"""PostgreSQL implementation of ActivityRepository."""

from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nexoscore.domain.entities import (
    CustomerRelationship,
    ReminderEvent,
    ReminderStatus,
    RiskLevel,
    TransactionEvent,
    TransactionType,
)
from nexoscore.domain.interfaces import ActivityRepository
from nexoscore.infrastructure.database.models import (
    CustomerModel,
    MessageLogModel,
    ReminderModel,
    TransactionModel,
    to_naive_utc,
)


class PostgresActivityRepository(ActivityRepository):
    """
    PostgreSQL implementation of the activity repository.

    Read-only: the messaging flows own these tables. A failed query rolls
    the session back before re-raising, so one broken source does not
    poison the reads that follow.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_customers(self, merchant_id: str) -> List[CustomerRelationship]:
        stmt = select(CustomerModel).where(CustomerModel.merchant_id == str(merchant_id))
        result = await self._execute(stmt)
        return [
            CustomerRelationship(
                id=str(model.id),
                merchant_id=str(model.merchant_id),
                name=model.name,
                phone=model.phone,
                total_debt=model.total_debt,
                total_paid=model.total_paid,
                total_transactions=model.total_transactions,
                avg_days_to_pay=model.avg_days_to_pay or 0.0,
                risk_level=RiskLevel(model.risk_level),
                last_transaction_at=to_naive_utc(model.last_transaction_at),
            )
            for model in result.scalars().all()
        ]

    async def get_transactions_since(
        self,
        merchant_id: str,
        since: datetime,
    ) -> List[TransactionEvent]:
        """Transactions at or after ``since``, newest first."""
        stmt = (
            select(TransactionModel)
            .where(
                TransactionModel.merchant_id == str(merchant_id),
                TransactionModel.created_at >= since,
            )
            .order_by(TransactionModel.created_at.desc())
        )
        result = await self._execute(stmt)
        return [
            TransactionEvent(
                id=str(model.id),
                type=TransactionType(model.type),
                amount=model.amount,
                currency=model.currency,
                customer_id=str(model.customer_id) if model.customer_id else None,
                created_at=to_naive_utc(model.created_at),
            )
            for model in result.scalars().all()
        ]

    async def get_recent_reminders(
        self,
        merchant_id: str,
        limit: int = 100,
    ) -> List[ReminderEvent]:
        stmt = (
            select(ReminderModel)
            .where(ReminderModel.merchant_id == str(merchant_id))
            .order_by(ReminderModel.created_at.desc())
            .limit(limit)
        )
        result = await self._execute(stmt)
        return [
            ReminderEvent(
                id=str(model.id),
                customer_id=str(model.customer_id),
                amount=model.amount,
                status=ReminderStatus(model.status),
                sent_at=to_naive_utc(model.sent_at),
            )
            for model in result.scalars().all()
        ]

    async def get_intents(self, merchant_id: str) -> List[str]:
        """Distinct intents recorded for the merchant."""
        stmt = (
            select(MessageLogModel.intent)
            .where(
                MessageLogModel.merchant_id == str(merchant_id),
                MessageLogModel.intent.is_not(None),
            )
            .distinct()
        )
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def _execute(self, stmt):
        try:
            return await self._session.execute(stmt)
        except Exception:
            await self._session.rollback()
            raise
