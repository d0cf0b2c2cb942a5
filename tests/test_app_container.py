# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: test_app_container.py
# -----------------------------------------------------------------------------
import pytest

from api.AppContainer import AppContainer
from config.Config import Config


@pytest.fixture
def container(tmp_path, sample_loader):
    cfg = Config(
        openai_api_key="sk-test",
        chroma_path=str(tmp_path / "chroma"),
        corpus_path=str(sample_loader.path),
        collection_name="swapi_wiring",
    )
    c = AppContainer(cfg)
    yield c
    c.close()


def test_services_share_infrastructure(container):
    assert container.ingest_service.store is container.store
    assert container.searcher.store is container.store
    assert container.ingest_service.embedder is container.embedder
    assert container.tools.corpus_loader is container.corpus_loader
    assert container.health_service.ingest_service is container.ingest_service
    assert container.ingest_service.index_name == "swapi_wiring"


def test_fresh_container_reports_empty_index(container):
    results = container.health_service.run_checks()

    assert results["corpus_readable"] is True
    assert results["vector_store_reachable"] is True
    assert results["index_populated"] is False


def test_close_refuses_new_progress_streams(container):
    container.close()

    with pytest.raises(RuntimeError):
        container.progress_registry.register("late")
