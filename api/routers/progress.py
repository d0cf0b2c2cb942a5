# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: progress.py
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from api.dependencies import get_progress_registry
from services.ProgressRegistry import ProgressRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("/{session_id}")
async def get_progress(
    session_id: str,
    registry: ProgressRegistry = Depends(get_progress_registry),
) -> StreamingResponse:
    session_id = (session_id or "").strip()
    if not session_id:
        raise HTTPException(status_code=400, detail="session_id must not be empty")

    try:
        registry.register(session_id)
    except RuntimeError as e:
        logger.warning("GET /progress/%s -> 503: %s", session_id, e)
        raise HTTPException(status_code=503, detail=str(e))

    logger.info("GET /progress/%s (stream opened)", session_id)
    return StreamingResponse(
        registry.stream(session_id),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
