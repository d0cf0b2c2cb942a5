# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: api/schemas/entities.py
# -----------------------------------------------------------------------------
from typing import Optional

from pydantic import BaseModel


class RelatedEntity(BaseModel):
    id: Optional[int] = None
    name: str
