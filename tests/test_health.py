# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-06
# Description: test_health.py
# -----------------------------------------------------------------------------
import pytest
from starlette.testclient import TestClient

from api.dependencies import get_health_service
from api.main import app
from corpus.SwapiCorpusLoader import SwapiCorpusLoader
from corpus.SwapiTextProjector import SwapiTextProjector
from services.SwapiHealthService import SwapiHealthService
from services.SwapiIngestService import SwapiIngestService


@pytest.fixture
def ingest_service(sample_loader, fake_embedder, chroma_store, index_name):
    return SwapiIngestService(
        corpus_loader=sample_loader,
        projector=SwapiTextProjector(),
        embedder=fake_embedder,
        store=chroma_store,
        index_name=index_name,
        throttle_seconds=0,
    )


@pytest.fixture
def health_service(test_cfg, chroma_store, sample_loader, ingest_service):
    return SwapiHealthService(
        cfg=test_cfg, store=chroma_store, corpus_loader=sample_loader, ingest_service=ingest_service
    )


@pytest.fixture
def client(health_service):
    app.dependency_overrides[get_health_service] = lambda: health_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_root():
    resp = TestClient(app).get("/health/")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "message": "SWAPI RAG API running"}


def test_deep_health_is_degraded_before_ingest(client, index_name):
    resp = client.get("/health/deep")

    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "degraded"
    assert data["index_name"] == index_name
    assert data["results"] == {
        "openai_key_configured": True,
        "corpus_readable": True,
        "vector_store_reachable": True,
        "index_populated": False,
    }
    assert data["summary"] == {"total": 4, "passed": 3, "failed": 1}
    assert data["checked_at"]


def test_deep_health_is_ok_after_ingest(client, ingest_service):
    ingest_service.rebuild_index()

    data = client.get("/health/deep").json()

    assert data["status"] == "ok"
    assert data["summary"]["failed"] == 0


def test_missing_corpus_is_reported(test_cfg, chroma_store, ingest_service, tmp_path):
    svc = SwapiHealthService(
        cfg=test_cfg,
        store=chroma_store,
        corpus_loader=SwapiCorpusLoader(tmp_path / "missing.json"),
        ingest_service=ingest_service,
    )

    assert svc.run_checks()["corpus_readable"] is False


def test_unreachable_store_skips_index_check(test_cfg, sample_loader, ingest_service):
    class DownStore:
        def test_connection(self):
            return False

    svc = SwapiHealthService(
        cfg=test_cfg, store=DownStore(), corpus_loader=sample_loader, ingest_service=ingest_service
    )

    results = svc.run_checks()
    assert results["vector_store_reachable"] is False
    assert results["index_populated"] is False


def test_deep_health_failure_is_500(client, health_service, monkeypatch):
    def boom():
        raise RuntimeError("checks exploded")

    monkeypatch.setattr(health_service, "run_checks", boom)

    assert client.get("/health/deep").status_code == 500
