# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-02-06
# Description: conftest.py
# -----------------------------------------------------------------------------

import copy
import hashlib
import json
import re
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import chromadb
import numpy as np
import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from config.Config import Config  # noqa: E402
from corpus.SwapiCorpus import SwapiCorpus  # noqa: E402

SAMPLE_CORPUS_PATH = ROOT / "data" / "database.json"

_TOKEN = re.compile(r"[a-z0-9]+")


class FakeEmbedder:
    """
    Deterministic hashed bag-of-words embedder. Texts sharing words end up
    close in cosine space, which is all the search tests rely on.
    """

    def __init__(self, dims: int = 256, fail_on: Optional[str] = None) -> None:
        self.dims = dims
        self.fail_on = fail_on
        self.calls: List[str] = []

    @property
    def ndims(self) -> Optional[int]:
        return self.dims

    def embed(self, text: str) -> List[float]:
        return self.embed_texts([text])[0]

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        out = []
        for text in texts:
            self.calls.append(text)
            if self.fail_on and self.fail_on in text:
                from errors import EmbeddingError
                raise EmbeddingError(f"fake failure for text containing {self.fail_on!r}")
            out.append(self._vector(text))
        return out

    def _vector(self, text: str) -> List[float]:
        vec = np.zeros(self.dims, dtype=np.float32)
        for token in _TOKEN.findall(text.lower()):
            bucket = int(hashlib.md5(token.encode("utf-8")).hexdigest(), 16) % self.dims
            vec[bucket] += 1.0
        norm = np.linalg.norm(vec)
        if norm == 0:
            vec[0] = 1.0
            norm = 1.0
        return (vec / norm).tolist()


@pytest.fixture
def three_characters() -> Dict[str, Any]:
    """Three characters, only Darth Vader has yellow eyes."""
    return {
        "characters": [
            {"id": 1, "name": "Luke Skywalker", "eye_color": "blue", "hair_color": "blond", "gender": "male"},
            {"id": 4, "name": "Darth Vader", "eye_color": "yellow", "hair_color": "none", "gender": "male"},
            {"id": 5, "name": "Leia Organa", "eye_color": "brown", "hair_color": "brown", "gender": "female"},
        ]
    }


@pytest.fixture
def sample_collections() -> Dict[str, Any]:
    return json.loads(SAMPLE_CORPUS_PATH.read_text(encoding="utf-8"))


@pytest.fixture
def sample_corpus(sample_collections) -> SwapiCorpus:
    return SwapiCorpus(sample_collections)


@pytest.fixture
def write_corpus(tmp_path):
    """Write a collections dict to a temp database.json and return its path."""

    def _write(collections: Dict[str, Any], name: str = "database.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(copy.deepcopy(collections)), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def test_cfg() -> Config:
    return Config(openai_api_key="sk-test", collection_name="swapi_test")


@pytest.fixture(scope="session")
def chroma_client():
    return chromadb.EphemeralClient()


@pytest.fixture
def chroma_store(chroma_client):
    from vectorstore.ChromaSwapiVectorIndex import ChromaSwapiVectorIndex

    return ChromaSwapiVectorIndex(client=chroma_client)


@pytest.fixture
def index_name(chroma_store):
    name = f"swapi_test_{uuid.uuid4().hex[:12]}"
    yield name
    chroma_store.drop_index(name)


@pytest.fixture
def sample_loader():
    from corpus.SwapiCorpusLoader import SwapiCorpusLoader

    return SwapiCorpusLoader(SAMPLE_CORPUS_PATH)


@pytest.fixture
def embedder_factory():
    return FakeEmbedder
