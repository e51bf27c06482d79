"""NexoScore API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from nexoscore.application.services import BatchRunner, LookupService, ScoringService
from nexoscore.core.config import settings
from nexoscore.core.dependencies import (
    get_batch_runner,
    get_lookup_service,
    get_scoring_service,
    verify_api_key,
)
from nexoscore.domain.exceptions import MerchantNotFoundException
from nexoscore.presentation.schemas import (
    BatchStatusSchema,
    BatchSummarySchema,
    DistributionSchema,
    ErrorResponseSchema,
    LeaderboardEntrySchema,
    LeaderboardSchema,
    ScoreLookupSchema,
    ScoreResultSchema,
)

score_router = APIRouter(
    prefix="/score",
    dependencies=[Depends(verify_api_key)],
    responses={
        401: {"model": ErrorResponseSchema, "description": "Missing or invalid API key"},
    },
)


@score_router.post(
    "/calculate/{merchant_id}",
    response_model=ScoreResultSchema,
    summary="Calculate NexoScore",
    description="""
    Recalculate the NexoScore of one merchant now.

    The snapshot is persisted and the merchant's current score updated.
    """,
    responses={
        404: {"model": ErrorResponseSchema, "description": "Merchant not found"},
    },
)
async def calculate_score(
    merchant_id: Annotated[UUID, Path(description="UUID of the merchant to score")],
    scoring_service: Annotated[ScoringService, Depends(get_scoring_service)],
) -> ScoreResultSchema:
    result = await scoring_service.calculate_score(str(merchant_id))
    if result is None:
        raise MerchantNotFoundException(str(merchant_id))
    return ScoreResultSchema.model_validate(result.to_dict())


@score_router.post(
    "/batch/recalculate",
    response_model=BatchSummarySchema,
    summary="Recalculate All Scores",
    description="Score every active merchant, as the nightly job does.",
    responses={
        409: {"model": ErrorResponseSchema, "description": "A batch run is in progress"},
    },
)
async def recalculate_all(
    batch_runner: Annotated[BatchRunner, Depends(get_batch_runner)],
) -> BatchSummarySchema:
    summary = await batch_runner.run()
    return BatchSummarySchema.model_validate(summary.to_dict())


@score_router.get(
    "/batch/status",
    response_model=BatchStatusSchema,
    summary="Batch Status",
    description="Current batch state and the summary of the last completed run.",
)
async def batch_status(
    batch_runner: Annotated[BatchRunner, Depends(get_batch_runner)],
) -> BatchStatusSchema:
    last = batch_runner.last_summary
    return BatchStatusSchema(
        state=batch_runner.state.value,
        last_run=BatchSummarySchema.model_validate(last.to_dict()) if last else None,
    )


@score_router.get(
    "/board/top",
    response_model=LeaderboardSchema,
    summary="Top Merchants",
    description="Best-scored active merchants, highest first.",
)
async def leaderboard(
    lookup_service: Annotated[LookupService, Depends(get_lookup_service)],
    limit: Annotated[int, Query(ge=1, description="Number of merchants to return")] = 50,
) -> LeaderboardSchema:
    limit = min(limit, settings.leaderboard_max_limit)
    entries = await lookup_service.get_leaderboard(limit=limit)
    return LeaderboardSchema(
        merchants=[
            LeaderboardEntrySchema(
                rank=e.rank,
                name=e.name,
                business_type=e.business_type,
                city=e.city,
                score=e.score,
                tier=e.tier,
            )
            for e in entries
        ],
        count=len(entries),
    )


@score_router.get(
    "/stats/distribution",
    response_model=DistributionSchema,
    summary="Score Distribution",
    description="Merchants per tier and the average score.",
)
async def distribution(
    lookup_service: Annotated[LookupService, Depends(get_lookup_service)],
) -> DistributionSchema:
    stats = await lookup_service.get_distribution()
    return DistributionSchema(total=stats.total, average=stats.average, by_tier=stats.by_tier)


@score_router.get(
    "/{identifier}",
    response_model=ScoreLookupSchema,
    summary="Look Up Score",
    description="""
    Look up a merchant's NexoScore by phone number or national id.

    Returns the merchant's public profile, current score and tier, the latest
    component breakdown and alerts, and up to 30 history points.
    """,
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid identifier"},
        404: {"model": ErrorResponseSchema, "description": "Merchant not found"},
    },
)
async def lookup_score(
    identifier: Annotated[
        str,
        Path(max_length=32, description="Phone (+595981234567) or national id (4523871)"),
    ],
    lookup_service: Annotated[LookupService, Depends(get_lookup_service)],
) -> ScoreLookupSchema:
    lookup = await lookup_service.get_score(identifier)
    if lookup is None:
        raise MerchantNotFoundException(identifier)
    return ScoreLookupSchema.model_validate(lookup.to_dict())
