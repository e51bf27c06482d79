"""APScheduler-backed implementation of the Scheduler port."""

from datetime import time, timedelta

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from nexoscore.domain.interfaces import Job, Scheduler

logger = structlog.get_logger(__name__)


class APSchedulerScheduler(Scheduler):
    """
    Runs jobs on the application's asyncio event loop.

    ``start`` must be called from within a running loop (the FastAPI
    lifespan).

    Args:
        timezone_name: IANA timezone that ``run_at`` times are expressed in
    """

    def __init__(self, timezone_name: str = "America/Asuncion"):
        self.timezone_name = timezone_name
        self._scheduler = AsyncIOScheduler(timezone=timezone_name)

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def run_at(self, at: time, job: Job, job_id: str) -> None:
        self._scheduler.add_job(
            job,
            CronTrigger(hour=at.hour, minute=at.minute, timezone=self.timezone_name),
            id=job_id,
            name=job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info(
            "job_scheduled",
            job_id=job_id,
            at=at.strftime("%H:%M"),
            timezone=self.timezone_name,
        )

    def run_every(self, interval: timedelta, job: Job, job_id: str) -> None:
        self._scheduler.add_job(
            job,
            IntervalTrigger(seconds=interval.total_seconds()),
            id=job_id,
            name=job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info("job_scheduled", job_id=job_id, every_seconds=interval.total_seconds())

    def start(self) -> None:
        if self._scheduler.running:
            logger.warning("scheduler_already_running")
            return
        self._scheduler.start()
        logger.info("scheduler_started", jobs=[job.id for job in self._scheduler.get_jobs()])

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("scheduler_stopped")
