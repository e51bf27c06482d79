"""
NexoScore - Main Application Entry Point

Merchant credit-scoring service: computes NexoScores on a nightly batch
and on demand, and serves lookups to risk partners.
"""

from contextlib import asynccontextmanager
from datetime import time
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from nexoscore import __version__
from nexoscore.core.config import settings
from nexoscore.core.dependencies import get_batch_runner
from nexoscore.core.logging import setup_logging
from nexoscore.core.metrics import get_metrics, get_metrics_content_type
from nexoscore.infrastructure.database import db_manager
from nexoscore.infrastructure.scheduler import APSchedulerScheduler
from nexoscore.presentation.api import api_router
from nexoscore.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)

SCORE_BATCH_JOB_ID = "nexoscore_daily_batch"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Set up logging
    - Initialize database connection pool
    - Schedule the daily score batch
    - Clean up on shutdown
    """
    setup_logging()
    db_manager.init()

    logger = structlog.get_logger(__name__)

    scheduler = None
    if settings.scheduler_enabled:
        scheduler = APSchedulerScheduler(timezone_name=settings.score_batch_timezone)
        scheduler.run_at(
            time(hour=settings.score_batch_hour, minute=settings.score_batch_minute),
            get_batch_runner().run_scheduled,
            job_id=SCORE_BATCH_JOB_ID,
        )
        scheduler.start()

    logger.info(
        "application_started",
        version=__version__,
        scheduler_enabled=settings.scheduler_enabled,
    )

    yield

    if scheduler is not None:
        scheduler.shutdown()
    await db_manager.close()
    logger.info("application_stopped")


app = FastAPI(
    title="NexoScore",
    description="Merchant Credit Scoring Service",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


if settings.metrics_enabled:

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(
            content=get_metrics(),
            media_type=get_metrics_content_type(),
        )


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""

    return RedirectResponse(url="/docs")
