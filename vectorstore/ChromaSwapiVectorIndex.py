# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-16
# Updated: 2026-02-03
# Description: ChromaSwapiVectorIndex
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, List, Optional, Sequence

import chromadb
from chromadb import ClientAPI

from config.Config import Config
from embedding.IndexedRecord import IndexedRecord, VectorHit
from errors import IndexNotReadyError
from utility.logging_utils import get_class_logger

ADD_BATCH_SIZE = 500


def build_chroma_client(cfg: Config) -> ClientAPI:
    if cfg.chroma_mode == "cloud":
        kwargs: Dict[str, Any] = {"api_key": cfg.chroma_api_key}
        if cfg.chroma_tenant:
            kwargs["tenant"] = cfg.chroma_tenant
        if cfg.chroma_database:
            kwargs["database"] = cfg.chroma_database
        return chromadb.CloudClient(**kwargs)
    if cfg.chroma_mode == "http":
        return chromadb.HttpClient(host=cfg.chroma_host, port=cfg.chroma_port)
    return chromadb.PersistentClient(path=cfg.chroma_path)


class ChromaIndexHandle:
    """Read access to one Chroma collection."""

    def __init__(self, collection: Any, logger: logging.Logger) -> None:
        self.collection = collection
        self.name: str = collection.name
        self.logger = logger

    def count(self) -> int:
        return int(self.collection.count())

    def dimensions(self) -> Optional[int]:
        res = self.collection.get(limit=1, include=["embeddings"])
        embeddings = res.get("embeddings")
        if embeddings is None or len(embeddings) == 0:
            return None
        return len(embeddings[0])

    def vector_search(self, vector: Sequence[float], n: int) -> List[VectorHit]:
        total = self.count()
        if total == 0 or n < 1:
            return []

        n_results = min(n, total)
        self.logger.debug(
            "Chroma query on '%s' (n_results=%d, requested=%d)", self.name, n_results, n
        )
        res = self.collection.query(
            query_embeddings=[list(vector)],
            n_results=n_results,
            include=["documents", "metadatas", "distances"],
        )

        ids = (res.get("ids") or [[]])[0]
        docs = (res.get("documents") or [[]])[0]
        metas = (res.get("metadatas") or [[]])[0]
        dists = (res.get("distances") or [[]])[0]

        hits = [
            VectorHit(
                id=ids[i],
                text=docs[i] or "",
                metadata=dict(metas[i] or {}),
                distance=float(dists[i]),
            )
            for i in range(len(ids))
        ]
        self.logger.debug("Chroma query on '%s' returned %d hits", self.name, len(hits))
        return hits

    def scan(self, page_size: int = 500) -> List[VectorHit]:
        """Every record in the collection, read in pages."""
        hits: List[VectorHit] = []
        offset = 0
        while True:
            res = self.collection.get(
                include=["documents", "metadatas"],
                limit=page_size,
                offset=offset,
            )
            ids = res.get("ids") or []
            docs = res.get("documents") or []
            metas = res.get("metadatas") or []
            for i, rid in enumerate(ids):
                hits.append(VectorHit(id=rid, text=docs[i] or "", metadata=dict(metas[i] or {})))
            if len(ids) < page_size:
                break
            offset += page_size

        self.logger.debug("Scanned %d records from '%s'", len(hits), self.name)
        return hits


class ChromaSwapiVectorIndex:
    """
    Chroma-backed vector index. One collection per index name, cosine space,
    embeddings always supplied by us (no Chroma-side embedding function).
    """

    def __init__(
        self,
        cfg: Config | None = None,
        *,
        client: ClientAPI | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or get_class_logger(self.__class__)
        if client is None:
            if cfg is None:
                raise ValueError("Either cfg or client is required")
            self.logger.info("Initialising Chroma client (%s)", cfg.summary())
            client = build_chroma_client(cfg)
        self.client = client

    def test_connection(self) -> bool:
        try:
            self.client.heartbeat()
            return True
        except Exception as e:
            self.logger.error("Chroma connection failed: %s", e)
            return False

    def list_index_names(self) -> List[str]:
        collections = self.client.list_collections()
        # older chromadb releases return plain names, newer ones Collection objects
        return [c if isinstance(c, str) else c.name for c in collections]

    def create_index(self, name: str, records: Sequence[IndexedRecord]) -> ChromaIndexHandle:
        self.logger.info("Creating Chroma collection '%s' with %d records", name, len(records))
        collection = self.client.create_collection(
            name=name,
            metadata={"hnsw:space": "cosine"},
            embedding_function=None,
        )

        for start in range(0, len(records), ADD_BATCH_SIZE):
            batch = records[start:start + ADD_BATCH_SIZE]
            collection.add(
                ids=[r.id for r in batch],
                documents=[r.text for r in batch],
                embeddings=[list(r.vector) for r in batch],
                metadatas=[r.metadata for r in batch],
            )
            self.logger.debug(
                "Added records %d-%d to '%s'", start, start + len(batch) - 1, name
            )

        self.logger.info("Chroma collection '%s' ready (%d records)", name, collection.count())
        return ChromaIndexHandle(collection, self.logger)

    def open_index(self, name: str) -> ChromaIndexHandle:
        try:
            names = self.list_index_names()
        except Exception as e:
            self.logger.error("Chroma unavailable while opening '%s': %s", name, e)
            raise IndexNotReadyError(f"Vector store unavailable: {e}") from e

        if name not in names:
            raise IndexNotReadyError(f"Index '{name}' does not exist yet")

        collection = self.client.get_collection(name=name, embedding_function=None)
        return ChromaIndexHandle(collection, self.logger)

    def drop_index(self, name: str) -> None:
        if name not in self.list_index_names():
            self.logger.debug("Drop skipped: collection '%s' does not exist", name)
            return
        self.client.delete_collection(name=name)
        self.logger.info("Dropped Chroma collection '%s'", name)
