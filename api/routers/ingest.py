# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: ingest.py
# -----------------------------------------------------------------------------
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response

from api.dependencies import get_ingest_service, get_progress_registry
from api.pipeline_errors import run_ingest_in_background
from api.schemas.ingest import (
    IngestAcceptedResponse,
    IngestRequest,
    IngestResultResponse,
    IngestStatusResponse,
)
from errors import CorpusLoadError, EmbeddingAuthError, IngestInProgressError
from services.ProgressRegistry import ProgressRegistry
from services.SwapiIngestService import SwapiIngestService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ingest", tags=["ingest"])


@router.post("", status_code=202, response_model=None)
def post_ingest(
    background_tasks: BackgroundTasks,
    response: Response,
    req: Optional[IngestRequest] = None,
    svc: SwapiIngestService = Depends(get_ingest_service),
    registry: ProgressRegistry = Depends(get_progress_registry),
):
    req = req or IngestRequest()
    session_id = (req.session_id or "").strip() or None
    logger.info("POST /ingest (start) session_id=%s wait=%s", session_id, req.wait)

    if svc.is_running:
        logger.warning("POST /ingest -> 409 (already running)")
        raise HTTPException(status_code=409, detail="Ingestion is already running")

    progress = None
    if session_id:
        # buffer events until the client attaches to /progress/{session_id}
        registry.register(session_id)
        progress = registry.callback_for(session_id)

    if not req.wait:
        background_tasks.add_task(run_ingest_in_background, svc, progress)
        logger.info("POST /ingest (accepted) index='%s'", svc.index_name)
        return IngestAcceptedResponse(index_name=svc.index_name, session_id=session_id)

    try:
        result = svc.rebuild_index(progress)
    except IngestInProgressError as e:
        logger.warning("POST /ingest -> 409: %s", e)
        raise HTTPException(status_code=409, detail=str(e))
    except EmbeddingAuthError as e:
        logger.error("POST /ingest -> 401: %s", e)
        raise HTTPException(status_code=401, detail=f"Embedding provider authentication failed: {e}")
    except CorpusLoadError as e:
        logger.error("POST /ingest -> 500 (corpus): %s", e)
        raise HTTPException(status_code=500, detail=f"Corpus could not be loaded: {e}")
    except Exception as e:
        logger.exception("POST /ingest -> 500: %s", e)
        raise HTTPException(status_code=500, detail=f"ingest failed: {e}")

    response.status_code = 200
    logger.info(
        "POST /ingest (done) ingested=%d/%d failures=%d",
        result.ingested,
        result.total,
        len(result.failures),
    )
    return IngestResultResponse(**result.to_dict())


@router.get("/status", response_model=IngestStatusResponse)
def get_ingest_status(svc: SwapiIngestService = Depends(get_ingest_service)) -> IngestStatusResponse:
    logger.info("GET /ingest/status")
    try:
        return IngestStatusResponse(**svc.index_status())
    except Exception as e:
        logger.exception("GET /ingest/status failed: %s", e)
        raise HTTPException(status_code=500, detail=f"ingest status failed: {e}")
