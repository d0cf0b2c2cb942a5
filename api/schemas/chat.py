# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-28
# Updated: 2026-02-06
# Description: api/schemas/chat.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from api.schemas.query import QueryHit
from settings import QUERY_DEFAULT_LIMIT, QUERY_MAX_LIMIT


class ChatRequest(BaseModel):
    question: str

    # Retrieval controls (mirror /query)
    limit: int = Field(QUERY_DEFAULT_LIMIT, ge=1, le=QUERY_MAX_LIMIT)

    # Prompt / model controls; None falls back to server defaults
    model: Optional[str] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, ge=1, le=4096)


class ToolCallTrace(BaseModel):
    name: str
    arguments: Any = None
    result: str


class ChatResponse(BaseModel):
    question: str
    answer: str
    limit: int
    sources: List[QueryHit] = Field(default_factory=list)
    entity_ids: Dict[str, List[int]] = Field(default_factory=dict)
    tool_calls: List[ToolCallTrace] = Field(default_factory=list)

    # helpful for debugging / telemetry
    model: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None
