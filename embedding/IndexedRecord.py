# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-02-03
# Description: IndexedRecord
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


def record_id(entity_type: str, entity_id: Any) -> str:
    return f"{entity_type}_{entity_id}"


@dataclass
class IndexedRecord:
    """Entity text + embedding vector + flattened metadata, as stored in the index."""
    id: str
    text: str
    vector: List[float]
    metadata: Dict[str, Any]


@dataclass
class VectorHit:
    """One row read back from the index. distance is None for scan rows."""
    id: str
    text: str
    metadata: Dict[str, Any]
    distance: Optional[float] = None
