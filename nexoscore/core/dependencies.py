"""Dependency injection for FastAPI."""

from functools import lru_cache
from typing import Annotated, List, Optional

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nexoscore.application.services import (
    BatchRunner,
    DataAggregator,
    LookupService,
    ScoringService,
)
from nexoscore.core.config import settings
from nexoscore.domain.exceptions import UnauthorizedException
from nexoscore.infrastructure.database import db_manager, get_db_session
from nexoscore.infrastructure.repositories import (
    PostgresActivityRepository,
    PostgresMerchantDirectory,
    PostgresMerchantRepository,
    PostgresScoreRepository,
)
from nexoscore.service.scoring import ScoreResult, ScoringEngine, scoring_settings


# Repository dependencies
async def get_merchant_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresMerchantRepository:
    """Get a MerchantRepository instance."""
    return PostgresMerchantRepository(session)


async def get_activity_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresActivityRepository:
    """Get an ActivityRepository instance."""
    return PostgresActivityRepository(session)


async def get_score_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresScoreRepository:
    """Get a ScoreRepository instance."""
    return PostgresScoreRepository(session)


async def get_merchant_directory() -> PostgresMerchantDirectory:
    """Get a MerchantDirectory instance with its own session per lookup."""
    return PostgresMerchantDirectory(db_manager.session)


# Service dependencies
def build_scoring_service(
    merchant_repo: PostgresMerchantRepository,
    activity_repo: PostgresActivityRepository,
    score_repo: PostgresScoreRepository,
    directory: PostgresMerchantDirectory,
) -> ScoringService:
    """Wire the single-merchant scoring pipeline."""
    aggregator = DataAggregator(
        merchant_repository=merchant_repo,
        activity_repository=activity_repo,
        reminder_limit=settings.reminder_fetch_limit,
        history_days=scoring_settings.history_days,
    )
    engine = ScoringEngine(
        settings=scoring_settings,
        directory=directory,
        network_timeout=settings.network_lookup_timeout,
    )
    return ScoringService(aggregator=aggregator, score_repository=score_repo, engine=engine)


async def get_scoring_service(
    merchant_repo: Annotated[PostgresMerchantRepository, Depends(get_merchant_repository)],
    activity_repo: Annotated[PostgresActivityRepository, Depends(get_activity_repository)],
    score_repo: Annotated[PostgresScoreRepository, Depends(get_score_repository)],
    directory: Annotated[PostgresMerchantDirectory, Depends(get_merchant_directory)],
) -> ScoringService:
    """Get a ScoringService instance with all dependencies."""
    return build_scoring_service(merchant_repo, activity_repo, score_repo, directory)


async def get_lookup_service(
    merchant_repo: Annotated[PostgresMerchantRepository, Depends(get_merchant_repository)],
    score_repo: Annotated[PostgresScoreRepository, Depends(get_score_repository)],
) -> LookupService:
    """Get a LookupService instance."""
    return LookupService(
        merchant_repository=merchant_repo,
        score_repository=score_repo,
        history_limit=settings.history_limit,
    )


# Batch runner: one per process, each merchant scored in its own session
async def list_active_merchant_ids() -> List[str]:
    async with db_manager.session() as session:
        return await PostgresMerchantRepository(session).list_active_ids()


async def score_merchant_in_own_session(merchant_id: str) -> Optional[ScoreResult]:
    async with db_manager.session() as session:
        service = build_scoring_service(
            PostgresMerchantRepository(session),
            PostgresActivityRepository(session),
            PostgresScoreRepository(session),
            PostgresMerchantDirectory(db_manager.session),
        )
        return await service.calculate_score(merchant_id)


@lru_cache
def get_batch_runner() -> BatchRunner:
    """Get the process-wide BatchRunner."""
    return BatchRunner(
        list_merchant_ids=list_active_merchant_ids,
        score_merchant=score_merchant_in_own_session,
        max_concurrency=settings.batch_max_concurrency,
    )


# Security
async def verify_api_key(
    x_api_key: Annotated[Optional[str], Header()] = None,
    api_key: Annotated[Optional[str], Query()] = None,
) -> None:
    """
    Require the configured API key, from the X-API-Key header or the
    api_key query parameter. An empty configured key disables the check.

    Raises:
        UnauthorizedException: If the key is missing or wrong
    """
    if not settings.api_key:
        return
    if (x_api_key or api_key) != settings.api_key:
        raise UnauthorizedException()
