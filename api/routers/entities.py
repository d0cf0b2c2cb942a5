# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: entities.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_corpus_loader
from api.schemas.entities import RelatedEntity
from corpus.SwapiCorpus import SwapiCorpus
from corpus.SwapiCorpusLoader import SwapiCorpusLoader
from errors import CorpusLoadError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["entities"])


def _corpus(loader: SwapiCorpusLoader) -> SwapiCorpus:
    try:
        return loader.cached()
    except CorpusLoadError as e:
        logger.error("Corpus unavailable: %s", e)
        raise HTTPException(status_code=503, detail=f"Corpus unavailable: {e}")


def _require_collection(corpus: SwapiCorpus, collection: str) -> None:
    if not corpus.has_collection(collection):
        raise HTTPException(status_code=404, detail=f"Unknown collection '{collection}'")


@router.get("/{collection}", response_model=List[Dict[str, Any]])
def list_entities(
    collection: str,
    search: Optional[str] = None,
    loader: SwapiCorpusLoader = Depends(get_corpus_loader),
) -> List[Dict[str, Any]]:
    corpus = _corpus(loader)
    _require_collection(corpus, collection)
    rows = corpus.list(collection, search=search)
    logger.info("GET /api/%s search=%r -> %d", collection, search, len(rows))
    return rows


@router.get("/{collection}/{entity_id}", response_model=Dict[str, Any])
def get_entity(
    collection: str,
    entity_id: int,
    loader: SwapiCorpusLoader = Depends(get_corpus_loader),
) -> Dict[str, Any]:
    corpus = _corpus(loader)
    _require_collection(corpus, collection)
    entity = corpus.get(collection, entity_id)
    if entity is None:
        logger.info("GET /api/%s/%d -> 404", collection, entity_id)
        raise HTTPException(status_code=404, detail=f"No {collection} entity with id {entity_id}")
    return entity


@router.get("/{collection}/{entity_id}/{related}", response_model=List[RelatedEntity])
def get_related(
    collection: str,
    entity_id: int,
    related: str,
    loader: SwapiCorpusLoader = Depends(get_corpus_loader),
) -> List[RelatedEntity]:
    corpus = _corpus(loader)
    _require_collection(corpus, collection)
    if corpus.get(collection, entity_id) is None:
        raise HTTPException(status_code=404, detail=f"No {collection} entity with id {entity_id}")
    if corpus.relation(collection, related) is None:
        raise HTTPException(status_code=404, detail=f"No relation '{collection}' -> '{related}'")

    try:
        rows = corpus.related(collection, entity_id, related)
    except TypeError as e:
        logger.exception("GET /api/%s/%d/%s failed: %s", collection, entity_id, related, e)
        raise HTTPException(status_code=500, detail=f"related lookup failed: {e}")

    logger.info("GET /api/%s/%d/%s -> %d", collection, entity_id, related, len(rows))
    return [RelatedEntity(id=r.get("id"), name=corpus.display_name(r)) for r in rows]
