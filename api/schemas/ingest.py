# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: api/schemas/ingest.py
# -----------------------------------------------------------------------------
from typing import List, Optional

from pydantic import BaseModel, Field


class IngestRequest(BaseModel):
    # progress events are published to /progress/{session_id} when given
    session_id: Optional[str] = None
    # run in the request instead of in the background
    wait: bool = False


class IngestFailureInfo(BaseModel):
    record_id: str
    error: str


class IngestResultResponse(BaseModel):
    index_name: str
    total: int
    ingested: int
    failed: int = 0
    failures: List[IngestFailureInfo] = Field(default_factory=list)
    dimensions: Optional[int] = None
    elapsed_ms: float


class IngestAcceptedResponse(BaseModel):
    status: str = "started"
    index_name: str
    session_id: Optional[str] = None


class IngestStatusResponse(BaseModel):
    index_name: str
    exists: bool
    populated: bool
    record_count: int
    dimensions: Optional[int] = None
    ingest_running: bool
