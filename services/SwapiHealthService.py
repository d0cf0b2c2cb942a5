# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-06
# Description: SwapiHealthService.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

from api.schemas.health import DeepHealthResponse, SmokeTestSummary
from config.Config import Config
from corpus.SwapiCorpusLoader import SwapiCorpusLoader
from services.SwapiIngestService import SwapiIngestService
from utility.logging_utils import get_class_logger


@dataclass
class SwapiHealthService:
    """
    Cheap readiness checks for the RAG pipeline's dependencies.
    Returns DeepHealthResponse for API layer.
    """

    cfg: Config
    store: Any
    corpus_loader: SwapiCorpusLoader
    ingest_service: SwapiIngestService

    def __post_init__(self) -> None:
        self.logger = get_class_logger(self.__class__)

    def run_checks(self) -> Dict[str, bool]:
        results: Dict[str, bool] = {
            "openai_key_configured": bool(self.cfg.openai_api_key),
            "corpus_readable": self.corpus_loader.exists(),
        }

        test_connection = getattr(self.store, "test_connection", None)
        results["vector_store_reachable"] = bool(test_connection()) if callable(test_connection) else True

        results["index_populated"] = (
            results["vector_store_reachable"] and self.ingest_service.is_index_populated()
        )
        self.logger.info("Health checks: %s", results)
        return results

    def deep_health(self) -> DeepHealthResponse:
        results = self.run_checks()

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        failed = total - passed

        return DeepHealthResponse(
            status="ok" if failed == 0 else "degraded",
            results=results,
            summary=SmokeTestSummary(total=total, passed=passed, failed=failed),
            index_name=self.ingest_service.index_name,
            checked_at=datetime.now(timezone.utc).isoformat(),
        )
