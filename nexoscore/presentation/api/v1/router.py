from fastapi import APIRouter

from .score import score_router

router = APIRouter()

router.include_router(score_router, tags=["NexoScore"])
