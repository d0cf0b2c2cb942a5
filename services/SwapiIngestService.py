# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-21
# Updated: 2026-02-05
# Description: SwapiIngestService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from corpus.SwapiCorpus import SwapiCorpus
from corpus.SwapiCorpusLoader import SwapiCorpusLoader
from corpus.SwapiTextProjector import SwapiTextProjector
from embedding.IndexedRecord import IndexedRecord, record_id
from embedding.SwapiEmbedder import SwapiEmbedder
from errors import EmbeddingAuthError, IndexNotReadyError, IngestInProgressError, SwapiRagError
from services.ProgressRegistry import ProgressCallback, no_progress
from settings import INGEST_THROTTLE_SECONDS
from utility.logging_utils import get_class_logger
from vectorstore.SwapiVectorIndex import SwapiVectorIndex


@dataclass
class IngestFailure:
    record_id: str
    error: str


@dataclass
class IngestResult:
    index_name: str
    total: int
    ingested: int
    failures: List[IngestFailure] = field(default_factory=list)
    dimensions: Optional[int] = None
    elapsed_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index_name": self.index_name,
            "total": self.total,
            "ingested": self.ingested,
            "failed": len(self.failures),
            "failures": [{"record_id": f.record_id, "error": f.error} for f in self.failures],
            "dimensions": self.dimensions,
            "elapsed_ms": round(self.elapsed_ms, 1),
        }


class SwapiIngestService:
    """
    Owns the full-corpus rebuild:
      - load database.json (with retry)
      - project each entity to text + metadata
      - embed (fixed delay between calls to stay under provider rate limits)
      - drop the old index and create the new one in one step at the end

    Only one rebuild runs at a time. The old index stays queryable until
    every record has been embedded.
    """

    def __init__(
        self,
        *,
        corpus_loader: SwapiCorpusLoader,
        projector: SwapiTextProjector,
        embedder: SwapiEmbedder,
        store: SwapiVectorIndex,
        index_name: str,
        throttle_seconds: float = INGEST_THROTTLE_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.corpus_loader = corpus_loader
        self.projector = projector
        self.embedder = embedder
        self.store = store
        self.index_name = index_name
        self.throttle_seconds = throttle_seconds
        self.logger = logger or get_class_logger(self.__class__)
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def rebuild_index(self, progress: ProgressCallback | None = None) -> IngestResult:
        emit = progress or no_progress
        if not self._lock.acquire(blocking=False):
            self.logger.warning("Rebuild of '%s' rejected: another rebuild is running", self.index_name)
            message = f"Ingestion into '{self.index_name}' is already running"
            # the caller's progress stream must still end
            emit("error", message, {"error_type": IngestInProgressError.__name__})
            raise IngestInProgressError(message)

        try:
            return self._rebuild(emit)
        except Exception as e:
            self.logger.error("Rebuild of '%s' failed: %s", self.index_name, e, exc_info=True)
            emit("error", f"Ingestion failed: {e}", {"error_type": type(e).__name__})
            raise
        finally:
            self._lock.release()

    def _rebuild(self, emit: ProgressCallback) -> IngestResult:
        start = time.time()
        emit("start", "Loading Star Wars data", {"index_name": self.index_name})

        corpus = self.corpus_loader.load()
        total = corpus.entity_count()
        emit("corpus_loaded", f"Loaded {total} entities", {"total": total})

        records, failures = self.build_records(corpus, emit)

        if total > 0 and not records:
            raise SwapiRagError(
                f"No records could be embedded ({len(failures)} failures); keeping existing index"
            )

        emit("indexing", f"Writing {len(records)} records to the vector index", {"records": len(records)})
        self.store.drop_index(self.index_name)
        handle = self.store.create_index(self.index_name, records)

        result = IngestResult(
            index_name=self.index_name,
            total=total,
            ingested=handle.count(),
            failures=failures,
            dimensions=len(records[0].vector) if records else None,
            elapsed_ms=(time.time() - start) * 1000.0,
        )
        self.logger.info(
            "Rebuild of '%s' complete: %d/%d records indexed, %d failed (%.1f ms)",
            self.index_name,
            result.ingested,
            total,
            len(failures),
            result.elapsed_ms,
        )
        emit("complete", f"Indexed {result.ingested} of {total} entities", result.to_dict())
        return result

    def build_records(
        self,
        corpus: SwapiCorpus,
        emit: ProgressCallback = no_progress,
    ) -> Tuple[List[IndexedRecord], List[IngestFailure]]:
        total = corpus.entity_count()
        records: List[IndexedRecord] = []
        failures: List[IngestFailure] = []
        seen: set = set()
        current = 0

        for entity_type, entities in corpus.entity_collections():
            self.logger.info("Processing %s (%d entities)", entity_type, len(entities))
            for entity in entities:
                current += 1
                rid = record_id(entity_type, entity.get("id"))
                try:
                    if entity.get("id") is None:
                        raise ValueError(f"{entity_type} entity without id")
                    if rid in seen:
                        raise ValueError(f"Duplicate record id '{rid}'")

                    text = self.projector.project(entity_type, entity, corpus)
                    metadata = self.projector.extract_metadata(entity_type, entity).to_dict()

                    if current > 1 and self.throttle_seconds > 0:
                        time.sleep(self.throttle_seconds)
                    vector = self.embedder.embed(text)

                    records.append(IndexedRecord(id=rid, text=text, vector=vector, metadata=metadata))
                    seen.add(rid)
                except EmbeddingAuthError:
                    raise
                except Exception as e:
                    self.logger.error("Failed to process %s: %s", rid, e)
                    failures.append(IngestFailure(record_id=rid, error=str(e)))

                emit(
                    "embedding",
                    f"Processed {current}/{total}: {rid}",
                    {"current": current, "total": total, "entity_type": entity_type},
                )

        return records, failures

    def is_index_populated(self) -> bool:
        try:
            return self.store.open_index(self.index_name).count() > 0
        except IndexNotReadyError:
            return False

    def index_status(self) -> Dict[str, Any]:
        try:
            handle = self.store.open_index(self.index_name)
            count = handle.count()
            dims = handle.dimensions()
            exists = True
        except IndexNotReadyError as e:
            self.logger.info("Index status: '%s' not ready (%s)", self.index_name, e)
            count, dims, exists = 0, None, False

        return {
            "index_name": self.index_name,
            "exists": exists,
            "populated": count > 0,
            "record_count": count,
            "dimensions": dims,
            "ingest_running": self.is_running,
        }
