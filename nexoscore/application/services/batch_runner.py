"""Batch runner - recalculates the score of every active merchant."""

import asyncio
import time
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

import structlog

from nexoscore.application.dto import BatchSummary
from nexoscore.core.metrics import record_batch_merchant, record_batch_run
from nexoscore.domain.exceptions import BatchAlreadyRunningException
from nexoscore.service.scoring import round_half_up

logger = structlog.get_logger(__name__)

ListMerchantIds = Callable[[], Awaitable[List[str]]]
ScoreMerchant = Callable[[str], Awaitable[Optional[Any]]]


class BatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class BatchRunner:
    """
    Runs the single-merchant pipeline over all active merchants.

    At most one run is in flight. Inside a run, up to ``max_concurrency``
    merchants are scored at once, and a failure on one merchant is counted
    without stopping the others.

    Args:
        list_merchant_ids: Returns the IDs of the merchants to score
        score_merchant: Scores one merchant; returns None when the merchant
            vanished, otherwise an object with a ``score`` attribute
        max_concurrency: Merchants scored concurrently
    """

    def __init__(
        self,
        list_merchant_ids: ListMerchantIds,
        score_merchant: ScoreMerchant,
        max_concurrency: int = 4,
    ):
        self._list_merchant_ids = list_merchant_ids
        self._score_merchant = score_merchant
        self._max_concurrency = max(1, max_concurrency)
        self._state = BatchState.IDLE
        self._last_summary: Optional[BatchSummary] = None

    @property
    def state(self) -> BatchState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == BatchState.RUNNING

    @property
    def last_summary(self) -> Optional[BatchSummary]:
        return self._last_summary

    async def run(self) -> BatchSummary:
        """
        Score every active merchant.

        Returns:
            Summary of the run

        Raises:
            BatchAlreadyRunningException: If a run is already in progress
        """
        if self._state == BatchState.RUNNING:
            raise BatchAlreadyRunningException()

        self._state = BatchState.RUNNING
        started_at = datetime.utcnow()
        start = time.perf_counter()

        try:
            merchant_ids = await self._list_merchant_ids()
        except Exception:
            self._state = BatchState.IDLE
            record_batch_run("failed", time.perf_counter() - start)
            logger.exception("batch_failed")
            raise

        logger.info("batch_started", merchants=len(merchant_ids))

        processed = 0
        errors = 0
        skipped = 0
        scores: List[int] = []
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def score_one(merchant_id: str) -> None:
            nonlocal processed, errors, skipped
            async with semaphore:
                try:
                    result = await self._score_merchant(merchant_id)
                except Exception as e:
                    errors += 1
                    record_batch_merchant("error")
                    logger.error(
                        "batch_merchant_failed",
                        merchant_id=merchant_id,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    return

            if result is None:
                skipped += 1
                record_batch_merchant("skipped")
                return

            processed += 1
            scores.append(result.score)
            record_batch_merchant("processed")

        try:
            await asyncio.gather(*(score_one(mid) for mid in merchant_ids))
        finally:
            self._state = BatchState.IDLE

        duration = time.perf_counter() - start
        avg_score = round_half_up(sum(scores) / len(scores)) if scores else 0
        summary = BatchSummary(
            processed=processed,
            errors=errors,
            skipped=skipped,
            avg_score=avg_score,
            started_at=started_at,
            finished_at=datetime.utcnow(),
            duration_ms=int(duration * 1000),
        )
        self._last_summary = summary

        record_batch_run("completed", duration, avg_score if scores else None)
        logger.info("batch_completed", **summary.to_dict())

        return summary

    async def run_scheduled(self) -> Optional[BatchSummary]:
        """Entry point for the scheduler: an overlapping trigger is skipped."""
        try:
            return await self.run()
        except BatchAlreadyRunningException:
            logger.warning("batch_trigger_skipped", reason="already_running")
            return None
