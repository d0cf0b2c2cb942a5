# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-05
# Description: query.py
# -----------------------------------------------------------------------------
from typing import Optional, Any, Dict, List

from pydantic import Field, BaseModel

from settings import QUERY_DEFAULT_LIMIT, QUERY_MAX_LIMIT

class QueryRequest(BaseModel):
    # blank queries are rejected by the router with 400
    query: str
    limit: int = Field(QUERY_DEFAULT_LIMIT, ge=1, le=QUERY_MAX_LIMIT)

class QueryHit(BaseModel):
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    relevance: Optional[float] = None

class QueryResponse(BaseModel):
    query: str
    limit: int
    attribute_query: bool = False
    results: List[QueryHit]
