# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-05
# Description: query router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_ingest_service, get_query_service
from api.pipeline_errors import pipeline_error_response
from api.schemas.query import QueryRequest, QueryResponse, QueryHit
from services.SwapiIngestService import SwapiIngestService
from services.SwapiQueryService import SwapiQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


@router.post("", response_model=QueryResponse)
def post_query(
    req: QueryRequest,
    svc: SwapiQueryService = Depends(get_query_service),
    ingest_svc: SwapiIngestService = Depends(get_ingest_service),
):
    query_text = (req.query or "").strip()
    if not query_text:
        raise HTTPException(status_code=400, detail="query must not be empty")

    logger.info("POST /query (start) query='%s' limit=%d", query_text[:120], req.limit)

    try:
        hits = svc.query(query_text, req.limit)
    except Exception as e:
        return pipeline_error_response(e, op="POST /query", ingest_svc=ingest_svc)

    results = [QueryHit(**h) for h in svc.to_context(hits)]
    logger.info("POST /query (done) results=%d", len(results))

    return QueryResponse(
        query=query_text,
        limit=req.limit,
        attribute_query=svc.is_attribute_query(query_text),
        results=results,
    )
