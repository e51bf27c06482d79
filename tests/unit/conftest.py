"""
Fixtures for unit tests.

Provides in-memory implementations of the repository ports, so application
services can be exercised without a database.
"""

from datetime import datetime
from typing import Dict, List, Optional

import pytest

from nexoscore.domain.entities import (
    CustomerRelationship,
    Merchant,
    ReminderEvent,
    ScoreSnapshot,
    TransactionEvent,
)
from nexoscore.domain.interfaces import (
    ActivityRepository,
    MerchantRepository,
    ScoreRepository,
)


# =============================================================================
# In-Memory Repositories
# =============================================================================

class InMemoryMerchantRepository(MerchantRepository):
    """Merchant repository backed by a dict."""

    def __init__(self, merchants: List[Merchant] = ()):
        self.merchants: Dict[str, Merchant] = {m.id: m for m in merchants}

    def add(self, merchant: Merchant) -> Merchant:
        self.merchants[merchant.id] = merchant
        return merchant

    async def get_by_id(self, merchant_id: str) -> Optional[Merchant]:
        return self.merchants.get(merchant_id)

    async def get_by_phone(self, phone: str) -> Optional[Merchant]:
        return next((m for m in self.merchants.values() if m.phone == phone), None)

    async def get_by_national_id(self, national_id: str) -> Optional[Merchant]:
        return next((m for m in self.merchants.values() if m.national_id == national_id), None)

    async def list_active_ids(self) -> List[str]:
        return [m.id for m in self.merchants.values() if m.is_active]

    async def get_top_scored(self, limit: int = 50) -> List[Merchant]:
        scored = [m for m in self.merchants.values() if m.is_active and m.current_score > 0]
        return sorted(scored, key=lambda m: m.current_score, reverse=True)[:limit]

    async def get_active_scores(self) -> List[int]:
        return [m.current_score for m in self.merchants.values() if m.is_active and m.current_score > 0]


class InMemoryActivityRepository(ActivityRepository):
    """Activity repository with optional per-source failures."""

    def __init__(self, failing: set = frozenset()):
        self.customers: Dict[str, List[CustomerRelationship]] = {}
        self.transactions: Dict[str, List[TransactionEvent]] = {}
        self.reminders: Dict[str, List[ReminderEvent]] = {}
        self.intents: Dict[str, List[str]] = {}
        self.failing = set(failing)

    def _check(self, source: str) -> None:
        if source in self.failing:
            raise RuntimeError(f"{source} table unavailable")

    async def get_customers(self, merchant_id: str) -> List[CustomerRelationship]:
        self._check("customers")
        return self.customers.get(merchant_id, [])

    async def get_transactions_since(
        self,
        merchant_id: str,
        since: datetime,
    ) -> List[TransactionEvent]:
        self._check("transactions")
        txs = [t for t in self.transactions.get(merchant_id, []) if t.created_at >= since]
        return sorted(txs, key=lambda t: t.created_at, reverse=True)

    async def get_recent_reminders(
        self,
        merchant_id: str,
        limit: int = 100,
    ) -> List[ReminderEvent]:
        self._check("reminders")
        return self.reminders.get(merchant_id, [])[:limit]

    async def get_intents(self, merchant_id: str) -> List[str]:
        self._check("intents")
        return self.intents.get(merchant_id, [])


class InMemoryScoreRepository(ScoreRepository):
    """Score store that also moves the merchant pointer."""

    def __init__(self, merchants: InMemoryMerchantRepository, fail_on_save: bool = False):
        self._merchants = merchants
        self.snapshots: List[ScoreSnapshot] = []
        self.fail_on_save = fail_on_save

    async def save(self, snapshot: ScoreSnapshot) -> ScoreSnapshot:
        if self.fail_on_save:
            raise RuntimeError("connection lost")
        self.snapshots.append(snapshot)
        merchant = self._merchants.merchants.get(snapshot.merchant_id)
        if merchant is not None:
            merchant.current_score = snapshot.score
        return snapshot

    async def get_history(self, merchant_id: str, limit: int = 30) -> List[ScoreSnapshot]:
        own = [s for s in self.snapshots if s.merchant_id == merchant_id]
        return sorted(own, key=lambda s: s.created_at, reverse=True)[:limit]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def merchant_repo() -> InMemoryMerchantRepository:
    return InMemoryMerchantRepository()


@pytest.fixture
def activity_repo() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
def score_repo(merchant_repo: InMemoryMerchantRepository) -> InMemoryScoreRepository:
    return InMemoryScoreRepository(merchant_repo)


@pytest.fixture
def failing_reminders_repo() -> InMemoryActivityRepository:
    return InMemoryActivityRepository(failing={"reminders"})


@pytest.fixture
def failing_score_repo(merchant_repo: InMemoryMerchantRepository) -> InMemoryScoreRepository:
    return InMemoryScoreRepository(merchant_repo, fail_on_save=True)
