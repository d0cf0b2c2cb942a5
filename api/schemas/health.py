# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-06
# Description: health.py
# -----------------------------------------------------------------------------
from typing import Dict, Literal

from pydantic import BaseModel

class HealthResponse(BaseModel):
    status: str
    message: str

class SmokeTestSummary(BaseModel):
    total: int
    passed: int
    failed: int

class DeepHealthResponse(BaseModel):
    # ok: every check passed, degraded: at least one failed
    status: Literal["ok", "degraded"]
    results: Dict[str, bool]
    summary: SmokeTestSummary
    index_name: str
    checked_at: str
