# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: build_vector_db.py
# -----------------------------------------------------------------------------
"""
Rebuild the SWAPI vector index offline, without starting the API.

Usage:
    python build_vector_db.py
    python build_vector_db.py --corpus ./data/database.json --collection swapi_data
"""
import argparse
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional

from config.Config import Config
from corpus.SwapiCorpusLoader import SwapiCorpusLoader
from corpus.SwapiTextProjector import SwapiTextProjector
from embedding.SwapiEmbedder import SwapiEmbedder
from errors import SwapiRagError
from services.SwapiIngestService import SwapiIngestService
from settings import INGEST_THROTTLE_SECONDS
from utility.logging_utils import get_logger
from vectorstore.ChromaSwapiVectorIndex import ChromaSwapiVectorIndex

logger = get_logger("build_vector_db")


def print_progress(event_type: str, message: str, data: Dict[str, Any]) -> None:
    if event_type == "embedding":
        current, total = data.get("current"), data.get("total")
        if current and total and (current == total or current % 25 == 0):
            print(f"  embedded {current}/{total}")
        return
    print(f"[{event_type}] {message}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rebuild the SWAPI vector index")
    parser.add_argument("--corpus", help="Path to database.json (default: SWAPI_CORPUS_PATH)")
    parser.add_argument("--collection", help="Index/collection name (default: SWAPI_COLLECTION)")
    parser.add_argument(
        "--throttle",
        type=float,
        default=INGEST_THROTTLE_SECONDS,
        help="Seconds to wait between embedding calls",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        cfg = Config.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    overrides = {}
    if args.corpus:
        overrides["corpus_path"] = args.corpus
    if args.collection:
        overrides["collection_name"] = args.collection
    if overrides:
        cfg = replace(cfg, **overrides)

    logger.info("Building vector index (%s)", cfg.summary())

    service = SwapiIngestService(
        corpus_loader=SwapiCorpusLoader(cfg.corpus_path),
        projector=SwapiTextProjector(),
        embedder=SwapiEmbedder(cfg),
        store=ChromaSwapiVectorIndex(cfg),
        index_name=cfg.collection_name,
        throttle_seconds=args.throttle,
    )

    try:
        result = service.rebuild_index(print_progress)
    except SwapiRagError as e:
        print(f"Build failed: {e}", file=sys.stderr)
        return 1

    print(
        f"\nIndex '{result.index_name}': {result.ingested}/{result.total} entities, "
        f"dims={result.dimensions}, {result.elapsed_ms / 1000.0:.1f}s"
    )
    for failure in result.failures:
        print(f"  FAILED {failure.record_id}: {failure.error}")

    return 0 if not result.failures else 1


if __name__ == "__main__":
    sys.exit(main())
