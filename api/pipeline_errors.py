# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: pipeline_errors.py
# -----------------------------------------------------------------------------
import logging

from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask

import settings
from errors import ChatAuthError, EmbeddingAuthError, IndexNotReadyError, IngestInProgressError
from services.ProgressRegistry import ProgressCallback
from services.SwapiIngestService import SwapiIngestService

logger = logging.getLogger(__name__)


def run_ingest_in_background(svc: SwapiIngestService, progress: ProgressCallback | None = None) -> None:
    """BackgroundTasks entry point. Nothing is waiting on the result, so outcomes are logged."""
    logger.info("Background ingest (start) index='%s'", svc.index_name)
    try:
        result = svc.rebuild_index(progress)
    except IngestInProgressError:
        logger.warning("Background ingest skipped: a rebuild of '%s' is already running", svc.index_name)
        return
    except Exception as e:
        logger.exception("Background ingest of '%s' failed: %s", svc.index_name, e)
        return
    logger.info(
        "Background ingest (done) index='%s' ingested=%d/%d failures=%d",
        result.index_name,
        result.ingested,
        result.total,
        len(result.failures),
    )


def pipeline_error_response(e: Exception, *, op: str, ingest_svc: SwapiIngestService) -> JSONResponse:
    """
    Map a query/chat pipeline failure to an HTTP response.

    A missing index is 503; when auto-ingest is on and nothing is running,
    a rebuild is attached to the response as a background task.
    """
    if isinstance(e, IndexNotReadyError):
        detail = f"Vector index is not ready: {e}"
        if ingest_svc.is_running:
            detail += ". Ingestion is in progress; retry shortly."
            logger.warning("%s -> 503 (index not ready, ingest running)", op)
            return JSONResponse(status_code=503, content={"detail": detail})

        if settings.AUTO_INGEST_ON_MISSING_INDEX:
            detail += ". Ingestion has been started in the background; retry shortly."
            logger.warning("%s -> 503 (index not ready, scheduling background ingest)", op)
            return JSONResponse(
                status_code=503,
                content={"detail": detail},
                background=BackgroundTask(run_ingest_in_background, ingest_svc),
            )

        logger.warning("%s -> 503 (index not ready, auto-ingest disabled)", op)
        return JSONResponse(status_code=503, content={"detail": detail})

    if isinstance(e, EmbeddingAuthError):
        logger.error("%s -> 401 (embedding provider rejected credentials): %s", op, e)
        return JSONResponse(status_code=401, content={"detail": f"Embedding provider authentication failed: {e}"})

    if isinstance(e, ChatAuthError):
        logger.error("%s -> 401 (chat provider rejected credentials): %s", op, e)
        return JSONResponse(status_code=401, content={"detail": f"Chat provider authentication failed: {e}"})

    logger.exception("%s -> 500: %s", op, e)
    return JSONResponse(status_code=500, content={"detail": f"{op} failed: {e}"})
