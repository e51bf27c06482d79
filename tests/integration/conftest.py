"""
Fixtures for integration tests.

Provides:
- In-memory database for testing
- Seed helpers for merchants, activity and score snapshots
- Test client for FastAPI app, wired to the test database
"""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import AsyncGenerator, AsyncIterator, Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from nexoscore.main import app
from nexoscore.application.services import BatchRunner
from nexoscore.core.dependencies import (
    build_scoring_service,
    get_activity_repository,
    get_batch_runner,
    get_merchant_directory,
    get_merchant_repository,
    get_score_repository,
)
from nexoscore.infrastructure.database import (
    Base,
    CustomerModel,
    MerchantModel,
    MessageLogModel,
    ReminderModel,
    ScoreSnapshotModel,
    TransactionModel,
)
from nexoscore.infrastructure.repositories import (
    PostgresActivityRepository,
    PostgresMerchantDirectory,
    PostgresMerchantRepository,
    PostgresScoreRepository,
)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def session_scope(test_session: AsyncSession):
    """Session factory for components that open their own session."""

    @asynccontextmanager
    async def scope() -> AsyncIterator[AsyncSession]:
        yield test_session

    return scope


# =============================================================================
# Seed Helpers
# =============================================================================

class Seeder:
    """Inserts merchants and their activity into the test database."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.now = datetime.utcnow()

    async def merchant(
        self,
        phone: str = "+595981234567",
        national_id: Optional[str] = "4523871",
        business_name: Optional[str] = "Despensa Rosa",
        nexo_score: int = 0,
        status: str = "active",
        age_days: int = 120,
    ) -> MerchantModel:
        model = MerchantModel(
            id=str(uuid4()),
            phone=phone,
            national_id=national_id,
            name="Doña Rosa",
            city="Asunción",
            business_name=business_name,
            business_type="despensa",
            nexo_score=nexo_score,
            status=status,
            created_at=self.now - timedelta(days=age_days),
        )
        self.session.add(model)
        await self.session.commit()
        return model

    async def activity(self, merchant_id: str, days: int = 45) -> None:
        """One customer, a daily sale, one reminder and a few intents."""
        customer = CustomerModel(
            id=str(uuid4()),
            merchant_id=merchant_id,
            name="Juan Pérez",
            phone="+595982111111",
            total_debt=80_000,
            total_paid=420_000,
            total_transactions=days,
            avg_days_to_pay=6.0,
        )
        self.session.add(customer)

        for day in range(days):
            self.session.add(TransactionModel(
                merchant_id=merchant_id,
                customer_id=customer.id,
                type="SALE_CREDIT" if day % 4 == 0 else "SALE_CASH",
                amount=75_000,
                created_at=self.now - timedelta(days=day, hours=1),
            ))

        self.session.add(ReminderModel(
            merchant_id=merchant_id,
            customer_id=customer.id,
            amount=80_000,
            status="sent",
            sent_at=self.now - timedelta(days=10),
        ))
        for intent in ("SALE_CASH", "SALE_CREDIT", "PAYMENT"):
            self.session.add(MessageLogModel(merchant_id=merchant_id, body="...", intent=intent))

        await self.session.commit()

    async def snapshots(self, merchant_id: str, scores: list) -> None:
        """Snapshots one day apart, the last score being the newest."""
        for days_ago, score in zip(range(len(scores) - 1, -1, -1), scores):
            self.session.add(ScoreSnapshotModel(
                merchant_id=merchant_id,
                score=score,
                tier="B",
                components={"tx_frequency": {"raw": 5.0, "label": "5.0 tx/week", "normalized": 0.71}},
                alerts=[],
                credit_limit=100_000,
                monthly_sales=500_000,
                created_at=self.now - timedelta(days=days_ago),
            ))
        await self.session.commit()


@pytest.fixture
def seed(test_session: AsyncSession) -> Seeder:
    return Seeder(test_session)


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest.fixture
def batch_runner(test_session: AsyncSession, session_scope) -> BatchRunner:
    """A BatchRunner scoring merchants one at a time on the test session."""

    async def list_ids():
        return await PostgresMerchantRepository(test_session).list_active_ids()

    async def score_merchant(merchant_id: str):
        service = build_scoring_service(
            PostgresMerchantRepository(test_session),
            PostgresActivityRepository(test_session),
            PostgresScoreRepository(test_session),
            PostgresMerchantDirectory(session_scope),
        )
        return await service.calculate_score(merchant_id)

    return BatchRunner(list_ids, score_merchant, max_concurrency=1)


@pytest_asyncio.fixture
async def client(
    test_session: AsyncSession,
    session_scope,
    batch_runner: BatchRunner,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with database dependencies overridden.

    This client:
    - Uses an in-memory SQLite database
    - Uses a batch runner bound to the test session
    """
    async def override_get_merchant_repository():
        return PostgresMerchantRepository(test_session)

    async def override_get_activity_repository():
        return PostgresActivityRepository(test_session)

    async def override_get_score_repository():
        return PostgresScoreRepository(test_session)

    async def override_get_merchant_directory():
        return PostgresMerchantDirectory(session_scope)

    def override_get_batch_runner():
        return batch_runner

    app.dependency_overrides[get_merchant_repository] = override_get_merchant_repository
    app.dependency_overrides[get_activity_repository] = override_get_activity_repository
    app.dependency_overrides[get_score_repository] = override_get_score_repository
    app.dependency_overrides[get_merchant_directory] = override_get_merchant_directory
    app.dependency_overrides[get_batch_runner] = override_get_batch_runner

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
