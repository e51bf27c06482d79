"""Data aggregator - gathers everything the calculators need about a merchant."""

from datetime import datetime, timedelta
from typing import Awaitable, List, Optional, TypeVar

import structlog

from nexoscore.domain.interfaces import ActivityRepository, MerchantRepository
from nexoscore.service.scoring import AggregatedData

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class DataAggregator:
    """
    Builds the AggregatedData record for one merchant.

    A failing sub-fetch is logged and treated as empty: a merchant with a
    broken reminders table still gets a score from the rest of its data.
    """

    def __init__(
        self,
        merchant_repository: MerchantRepository,
        activity_repository: ActivityRepository,
        reminder_limit: int = 100,
        history_days: int = 90,
    ):
        self._merchant_repo = merchant_repository
        self._activity_repo = activity_repository
        self._reminder_limit = reminder_limit
        self._history_days = history_days

    async def aggregate(
        self,
        merchant_id: str,
        as_of: Optional[datetime] = None,
    ) -> Optional[AggregatedData]:
        """
        Fetch a merchant with its customers, transactions, reminders and intents.

        Args:
            merchant_id: The merchant to aggregate
            as_of: Evaluation instant (UTC), defaults to now

        Returns:
            The aggregated record, or None if the merchant does not exist
        """
        as_of = as_of or datetime.utcnow()
        log = logger.bind(merchant_id=merchant_id)

        merchant = await self._merchant_repo.get_by_id(merchant_id)
        if merchant is None:
            log.info("aggregation_merchant_not_found")
            return None

        # Fetched one after another: all reads share one database session
        since = as_of - timedelta(days=self._history_days)
        customers = await self._fetch(
            "customers", self._activity_repo.get_customers(merchant_id), log
        )
        transactions = await self._fetch(
            "transactions", self._activity_repo.get_transactions_since(merchant_id, since), log
        )
        reminders = await self._fetch(
            "reminders",
            self._activity_repo.get_recent_reminders(merchant_id, limit=self._reminder_limit),
            log,
        )
        intents = await self._fetch(
            "intents", self._activity_repo.get_intents(merchant_id), log
        )

        log.debug(
            "merchant_data_aggregated",
            customers=len(customers),
            transactions=len(transactions),
            reminders=len(reminders),
            intents=len(intents),
        )

        return AggregatedData(
            merchant=merchant,
            as_of=as_of,
            customers=customers,
            transactions=transactions,
            reminders=reminders,
            intents=intents,
        )

    async def _fetch(self, source: str, query: Awaitable[List[T]], log) -> List[T]:
        try:
            return list(await query)
        except Exception as e:
            log.warning("aggregation_fetch_failed", source=source, error=str(e))
            return []
