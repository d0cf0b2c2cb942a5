# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-02-03
# Description: SwapiEmbedder
# -----------------------------------------------------------------------------
import json
from typing import Any, List, Optional, Sequence

import numpy as np
import openai
from openai import OpenAI

from config.Config import Config
from errors import EmbeddingAuthError, EmbeddingError
from utility.logging_utils import get_class_logger

PREVIEW_CHARS = 120


class SwapiEmbedder:
    """
    OpenAI embeddings for entity texts and user queries.

    Every call is fallible: credential problems raise EmbeddingAuthError,
    malformed payloads are logged and re-raised untouched, everything else
    raises EmbeddingError. A failure never comes back as an empty vector.
    """

    def __init__(self, cfg: Config, *, client: Any = None, logger=None):
        self.cfg = cfg
        self.logger = logger or get_class_logger(self.__class__)
        self.model = cfg.openai_embed_model
        self.client = client or OpenAI(
            api_key=cfg.openai_api_key,
            base_url=cfg.openai_base_url or None,
        )
        self._ndims: Optional[int] = None
        self.logger.info("OpenAI Embedder initialized (model=%s)", self.model)

    @property
    def ndims(self) -> Optional[int]:
        """Embedding dimension, known after the first successful call."""
        return self._ndims

    def embed(self, text: str) -> List[float]:
        return self.embed_texts([text])[0]

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        texts = list(texts)
        if not texts:
            return []

        try:
            resp = self.client.embeddings.create(
                model=self.model,
                input=texts,
                encoding_format="float",
            )
        except openai.AuthenticationError as e:
            self.logger.error("Embedding request rejected (authentication): %s", e)
            raise EmbeddingAuthError(f"OpenAI rejected the API key: {e}") from e
        except json.JSONDecodeError as e:
            self._log_malformed_response(e, len(texts))
            raise
        except openai.OpenAIError as e:
            self.logger.warning(
                "Embedding request failed (model=%s, texts=%d): %s",
                self.model, len(texts), e,
            )
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        return self._to_vectors(resp, len(texts))

    def _to_vectors(self, resp: Any, expected: int) -> List[List[float]]:
        data = getattr(resp, "data", None) or []
        if len(data) != expected:
            raise EmbeddingError(f"Expected {expected} embeddings, got {len(data)}")

        try:
            arr = np.asarray([d.embedding for d in data], dtype=np.float32)
        except (TypeError, ValueError) as e:
            raise EmbeddingError(f"Embedding response has inconsistent vectors: {e}") from e

        if arr.ndim != 2 or arr.shape[1] == 0:
            raise EmbeddingError(f"Embedding response has unexpected shape {arr.shape}")

        if self._ndims is None:
            self._ndims = int(arr.shape[1])
            self.logger.info("Embedding dimension detected: %d", self._ndims)
        elif arr.shape[1] != self._ndims:
            raise EmbeddingError(
                f"Embedding dimension changed from {self._ndims} to {arr.shape[1]}"
            )

        return arr.tolist()

    def _log_malformed_response(self, e: json.JSONDecodeError, n_texts: int) -> None:
        doc = e.doc or ""
        lo = max(0, e.pos - PREVIEW_CHARS // 2)
        self.logger.error(
            "Malformed embedding response (model=%s, texts=%d): %s | position=%d bytes=%d preview=%r",
            self.model,
            n_texts,
            e.msg,
            e.pos,
            len(doc.encode("utf-8")),
            doc[lo:lo + PREVIEW_CHARS],
        )
