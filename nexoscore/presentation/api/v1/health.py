"""Health check endpoint for service monitoring."""

from fastapi import APIRouter
from pydantic import BaseModel

from nexoscore import __version__
from nexoscore.core.dependencies import get_batch_runner

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    batch_state: str


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the service.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        batch_state=get_batch_runner().state.value,
    )
