"""PostgreSQL implementations of MerchantRepository and MerchantDirectory."""

from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from nexoscore.domain.entities import Merchant, MerchantStatus
from nexoscore.domain.interfaces import MerchantDirectory, MerchantRepository
from nexoscore.infrastructure.database.models import MerchantModel, to_naive_utc

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]


class PostgresMerchantRepository(MerchantRepository):
    """
    PostgreSQL implementation of the Merchant repository.

    Uses SQLAlchemy async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, merchant_id: str) -> Optional[Merchant]:
        """Retrieve a merchant by ID."""
        stmt = select(MerchantModel).where(MerchantModel.id == str(merchant_id))
        return await self._one(stmt)

    async def get_by_phone(self, phone: str) -> Optional[Merchant]:
        """Retrieve a merchant by phone number."""
        stmt = select(MerchantModel).where(MerchantModel.phone == phone)
        return await self._one(stmt)

    async def get_by_national_id(self, national_id: str) -> Optional[Merchant]:
        """Retrieve a merchant by national id."""
        stmt = (
            select(MerchantModel)
            .where(MerchantModel.national_id == national_id)
            .order_by(MerchantModel.created_at)
            .limit(1)
        )
        return await self._one(stmt)

    async def list_active_ids(self) -> List[str]:
        """List the IDs of every active merchant, oldest first."""
        stmt = (
            select(MerchantModel.id)
            .where(MerchantModel.status == MerchantStatus.ACTIVE.value)
            .order_by(MerchantModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [str(merchant_id) for merchant_id in result.scalars().all()]

    async def get_top_scored(self, limit: int = 50) -> List[Merchant]:
        """Retrieve active, scored merchants ordered by score descending."""
        stmt = (
            select(MerchantModel)
            .where(
                MerchantModel.status == MerchantStatus.ACTIVE.value,
                MerchantModel.nexo_score > 0,
            )
            .order_by(MerchantModel.nexo_score.desc(), MerchantModel.created_at)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def get_active_scores(self) -> List[int]:
        """Current scores of active merchants that have a score."""
        stmt = select(MerchantModel.nexo_score).where(
            MerchantModel.status == MerchantStatus.ACTIVE.value,
            MerchantModel.nexo_score > 0,
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def _one(self, stmt) -> Optional[Merchant]:
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return self._to_entity(model)

    def _to_entity(self, model: MerchantModel) -> Merchant:
        """Convert database model to domain entity."""
        return Merchant(
            id=str(model.id),
            phone=model.phone,
            national_id=model.national_id,
            name=model.name,
            address=model.address,
            city=model.city,
            business_name=model.business_name,
            business_type=model.business_type,
            monthly_volume=model.monthly_volume,
            onboarded_at=to_naive_utc(model.onboarded_at),
            current_score=model.nexo_score,
            status=MerchantStatus(model.status),
            created_at=to_naive_utc(model.created_at),
        )


class PostgresMerchantDirectory(MerchantDirectory):
    """
    Looks up customer phones in the merchants table.

    Each lookup runs in its own session opened from ``session_scope``, so a
    lookup cancelled by the caller's timeout leaves the scoring session
    untouched.

    Args:
        session_scope: Returns an async context manager yielding a session,
            e.g. ``db_manager.session``
    """

    def __init__(self, session_scope: SessionScope):
        self._session_scope = session_scope

    async def count_registered_phones(self, phones: List[str]) -> int:
        if not phones:
            return 0
        stmt = select(func.count(func.distinct(MerchantModel.phone))).where(
            MerchantModel.phone.in_(phones)
        )
        async with self._session_scope() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one() or 0)
