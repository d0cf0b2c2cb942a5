# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: HybridSearcher
# -----------------------------------------------------------------------------
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from embedding.IndexedRecord import VectorHit
from embedding.SwapiEmbedder import SwapiEmbedder
from search.AttributeQueryPatterns import extract_key_terms, is_attribute_query
from settings import SEARCH_DEFAULTS
from utility.logging_utils import get_class_logger
from vectorstore.SwapiVectorIndex import SwapiIndexHandle, SwapiVectorIndex


@dataclass(frozen=True)
class SearchWeights:
    keyword_weight: float = SEARCH_DEFAULTS["keyword_weight"]
    vector_weight: float = SEARCH_DEFAULTS["vector_weight"]
    both_paths_bonus: float = SEARCH_DEFAULTS["both_paths_bonus"]


@dataclass
class SearchCandidate:
    record: VectorHit
    vector_rank: Optional[int] = None
    vector_score: float = 0.0
    keyword_rank: Optional[int] = None
    keyword_score: float = 0.0
    combined_score: float = 0.0

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def in_both_paths(self) -> bool:
        return self.vector_rank is not None and self.keyword_rank is not None


@dataclass
class SearchHit:
    id: str
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    relevance: float = 0.0

    def to_context(self) -> Dict[str, Any]:
        """Shape handed to prompt construction."""
        return {"content": self.text, "metadata": self.metadata, "relevance": self.relevance}


def merge_and_rank(
    vector_results: Sequence[VectorHit],
    keyword_results: Sequence[VectorHit],
    query: str = "",
    weights: Optional[SearchWeights] = None,
) -> List[SearchCandidate]:
    """
    Union of both result lists keyed by record id, scored as
    keyword*kw_weight + vector*vec_weight, plus a flat bonus for records
    both paths agree on. Sorted by combined score, highest first.
    """
    weights = weights or SearchWeights()
    candidates: Dict[str, SearchCandidate] = {}

    for rank, hit in enumerate(vector_results):
        if hit.id in candidates:
            continue
        score = 1.0 - hit.distance if hit.distance is not None else 0.0
        candidates[hit.id] = SearchCandidate(record=hit, vector_rank=rank, vector_score=score)

    n_keyword = len(keyword_results)
    for rank, hit in enumerate(keyword_results):
        score = 1.0 - (rank / n_keyword)
        cand = candidates.get(hit.id)
        if cand is None:
            cand = SearchCandidate(record=hit)
            candidates[hit.id] = cand
        elif cand.keyword_rank is not None:
            continue
        cand.keyword_rank = rank
        cand.keyword_score = score

    for cand in candidates.values():
        cand.combined_score = (
            cand.keyword_score * weights.keyword_weight
            + cand.vector_score * weights.vector_weight
        )
        if cand.in_both_paths:
            cand.combined_score += weights.both_paths_bonus

    return sorted(candidates.values(), key=lambda c: c.combined_score, reverse=True)


def _term_in_text(term: str, text: str) -> bool:
    if " " in term or ":" in term:
        return term.lower() in text
    return re.search(rf"\b{re.escape(term.lower())}\b", text) is not None


class HybridSearcher:
    """
    Vector k-NN search with a keyword re-ranking pass for attribute-style
    queries ("characters with red eyes"), where plain similarity tends to
    surface near-duplicate descriptions instead of exact trait matches.
    """

    def __init__(
        self,
        *,
        store: SwapiVectorIndex,
        embedder: SwapiEmbedder,
        index_name: str,
        weights: Optional[SearchWeights] = None,
        attribute_pool_multiplier: int = SEARCH_DEFAULTS["attribute_pool_multiplier"],
        attribute_min_pool: int = SEARCH_DEFAULTS["attribute_min_pool"],
        scan_page_size: int = SEARCH_DEFAULTS["scan_page_size"],
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.embedder = embedder
        self.index_name = index_name
        self.weights = weights or SearchWeights()
        self.attribute_pool_multiplier = attribute_pool_multiplier
        self.attribute_min_pool = attribute_min_pool
        self.scan_page_size = scan_page_size
        self.logger = logger or get_class_logger(self.__class__)

    def search_limit_for(self, query: str, limit: int) -> int:
        if is_attribute_query(query):
            return max(limit * self.attribute_pool_multiplier, self.attribute_min_pool)
        return limit

    def search(self, query: str, limit: int = 5) -> List[SearchHit]:
        query = (query or "").strip()
        if not query:
            raise ValueError("query must not be empty")
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

        start = time.time()
        attribute = is_attribute_query(query)
        search_limit = self.search_limit_for(query, limit)

        index = self.store.open_index(self.index_name)
        vector = self.embedder.embed(query)
        vector_results = index.vector_search(vector, search_limit)

        if not attribute:
            hits = [
                SearchHit(
                    id=h.id,
                    text=h.text,
                    metadata=h.metadata,
                    relevance=1.0 - h.distance if h.distance is not None else 0.0,
                )
                for h in vector_results[:limit]
            ]
            self._log_done("vector", query, start, len(vector_results), 0, hits)
            return hits

        keyword_results = self.keyword_search(index, query, search_limit)
        merged = merge_and_rank(vector_results, keyword_results, query, self.weights)

        hits = [
            SearchHit(
                id=c.id,
                text=c.record.text,
                metadata=c.record.metadata,
                relevance=min(1.0, max(0.0, c.combined_score)),
            )
            for c in merged[:limit]
        ]
        self._log_done("hybrid", query, start, len(vector_results), len(keyword_results), hits)
        return hits

    def keyword_search(self, index: SwapiIndexHandle, query: str, search_limit: int) -> List[VectorHit]:
        """
        Records containing any key term from the query. Exact composite
        matches ("eye color: red") rank first, then by matched-term count.
        """
        terms = extract_key_terms(query)
        composites = [t for t in terms if ":" in t]

        pool = index.scan(self.scan_page_size)
        scored = []
        for hit in pool:
            text = hit.text.lower()
            matched = [t for t in terms if _term_in_text(t, text)]
            if not matched:
                continue
            exact = any(c.lower() in text for c in composites)
            scored.append((hit, exact, len(matched)))

        scored.sort(key=lambda s: (not s[1], -s[2]))

        self.logger.debug(
            "Keyword path: terms=%s pool=%d matched=%d", terms, len(pool), len(scored)
        )
        return [hit for hit, _, _ in scored[:search_limit]]

    def _log_done(
        self,
        search_type: str,
        query: str,
        start: float,
        n_vector: int,
        n_keyword: int,
        hits: List[SearchHit],
    ) -> None:
        self.logger.info(
            "Search (%s) query=%r vector=%d keyword=%d returned=%d top=%.4f (%.1f ms)",
            search_type,
            query[:120],
            n_vector,
            n_keyword,
            len(hits),
            hits[0].relevance if hits else 0.0,
            (time.time() - start) * 1000.0,
        )
