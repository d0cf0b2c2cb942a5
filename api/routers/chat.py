# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-28
# Updated: 2026-02-06
# Description: chat.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_chat_service, get_ingest_service
from api.pipeline_errors import pipeline_error_response
from api.schemas.chat import ChatRequest, ChatResponse, ToolCallTrace
from api.schemas.query import QueryHit
from services.SwapiChatService import SwapiChatService
from services.SwapiIngestService import SwapiIngestService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

@router.post("", response_model=ChatResponse)
def post_chat(
        req: ChatRequest,
        svc: SwapiChatService = Depends(get_chat_service),
        ingest_svc: SwapiIngestService = Depends(get_ingest_service),
):
    question = (req.question or "").strip()
    if not question:
        raise HTTPException(status_code=400, detail="question must not be empty")

    logger.info("POST /chat (start) question_len=%d limit=%d", len(question), req.limit)

    try:
        out: Dict[str, Any] = svc.ask(
            question=question,
            limit=req.limit,
            model=req.model,
            temperature=req.temperature,
            max_tokens=req.max_tokens,
        )
    except Exception as e:
        return pipeline_error_response(e, op="POST /chat", ingest_svc=ingest_svc)

    sources = [QueryHit(**s) for s in out.get("sources", []) or []]
    tool_calls = [ToolCallTrace(**t) for t in out.get("tool_calls", []) or []]

    logger.info(
        "POST /chat (done) answer_len=%d sources=%d tool_calls=%d",
        len(out.get("answer", "") or ""),
        len(sources),
        len(tool_calls),
    )

    return ChatResponse(
        question=out["question"],
        answer=out["answer"],
        limit=req.limit,
        sources=sources,
        entity_ids=out.get("entity_ids") or {},
        tool_calls=tool_calls,
        model=out.get("model"),
        usage=out.get("usage"),
    )
