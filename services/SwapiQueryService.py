# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-05
# Description: SwapiQueryService
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from search.AttributeQueryPatterns import is_attribute_query
from search.HybridSearcher import HybridSearcher, SearchHit


@dataclass
class SwapiQueryService:
    searcher: HybridSearcher

    def query(self, query_text: str, limit: int = 5) -> List[SearchHit]:
        return self.searcher.search(query_text, limit)

    @staticmethod
    def is_attribute_query(query_text: str) -> bool:
        return is_attribute_query(query_text)

    @staticmethod
    def to_context(hits: Sequence[SearchHit]) -> List[Dict[str, Any]]:
        """Flatten hits into {content, metadata, relevance} dicts for prompt building."""
        return [h.to_context() for h in hits]
