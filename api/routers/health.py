# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-06
# Description: health.py
# -----------------------------------------------------------------------------
import logging
from fastapi import APIRouter, Depends, HTTPException

from api.schemas.health import HealthResponse, DeepHealthResponse
from api.dependencies import get_health_service
from services.SwapiHealthService import SwapiHealthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok", message="SWAPI RAG API running")


@router.get("/deep", response_model=DeepHealthResponse)
def deep_health_check(
    svc: SwapiHealthService = Depends(get_health_service),
) -> DeepHealthResponse:
    logger.info("GET /health/deep called")
    try:
        result = svc.deep_health()
    except Exception as e:
        logger.exception("GET /health/deep failed: %s", e)
        raise HTTPException(status_code=500, detail=f"deep health failed: {e}")

    logger.info("GET /health/deep completed (status=%s)", result.status)
    return result
