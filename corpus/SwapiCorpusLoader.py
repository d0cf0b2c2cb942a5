# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: SwapiCorpusLoader
# -----------------------------------------------------------------------------
import json
import logging
import threading
import time
from pathlib import Path
from typing import Optional, Union

from corpus.SwapiCorpus import SwapiCorpus
from errors import CorpusLoadError
from settings import CORPUS_READ_RETRIES, CORPUS_RETRY_BACKOFF_SECONDS
from utility.logging_utils import get_class_logger

PREVIEW_CHARS = 80


class SwapiCorpusLoader:
    """
    Reads the entity corpus (database.json) into memory.

    Decode failures are retried with exponential backoff, since the file
    may be mid-write when a rebuild starts. Every failed attempt logs the
    error position, byte length and a preview around the failure.
    """

    def __init__(
        self,
        path: Union[str, Path],
        *,
        retries: int = CORPUS_READ_RETRIES,
        backoff_seconds: float = CORPUS_RETRY_BACKOFF_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.path = Path(path)
        self.retries = max(1, retries)
        self.backoff_seconds = backoff_seconds
        self.logger = logger or get_class_logger(self.__class__)
        self._cache_lock = threading.Lock()
        self._cached: Optional[SwapiCorpus] = None

    def exists(self) -> bool:
        return self.path.is_file()

    def cached(self) -> SwapiCorpus:
        """Corpus from the most recent successful load, loading it on first use."""
        with self._cache_lock:
            if self._cached is None:
                self._cached = self.load()
            return self._cached

    def load(self) -> SwapiCorpus:
        if not self.exists():
            self.logger.error("Corpus file not found: '%s'", self.path)
            raise CorpusLoadError(f"Corpus file not found: {self.path}")

        delay = self.backoff_seconds
        for attempt in range(1, self.retries + 1):
            start = time.time()
            try:
                raw = self.path.read_bytes()
                doc = json.loads(raw.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                self._log_decode_failure(e, raw, attempt)
                if attempt == self.retries:
                    raise CorpusLoadError(
                        f"Corpus file '{self.path}' could not be parsed after {self.retries} attempts: {e}"
                    ) from e
            except OSError as e:
                self.logger.warning(
                    "Reading corpus '%s' failed (attempt %d/%d): %s",
                    self.path, attempt, self.retries, e,
                )
                if attempt == self.retries:
                    raise CorpusLoadError(f"Corpus file '{self.path}' could not be read: {e}") from e
            else:
                if not isinstance(doc, dict):
                    raise CorpusLoadError(
                        f"Corpus root must be a JSON object, got {type(doc).__name__}"
                    )
                corpus = SwapiCorpus(doc)
                elapsed = (time.time() - start) * 1000.0
                self.logger.info(
                    "Loaded corpus '%s' (%d bytes, %d entities, %d collections) in %.1f ms",
                    self.path,
                    len(raw),
                    corpus.entity_count(),
                    len(doc),
                    elapsed,
                )
                self._cached = corpus
                return corpus

            time.sleep(delay)
            delay *= 2

        # Unreachable and include for type checkers
        raise CorpusLoadError(f"Corpus file '{self.path}' could not be loaded")

    def _log_decode_failure(self, e: ValueError, raw: bytes, attempt: int) -> None:
        if isinstance(e, json.JSONDecodeError):
            pos = e.pos
        else:
            pos = getattr(e, "start", 0)

        text = raw.decode("utf-8", errors="replace")
        lo = max(0, pos - PREVIEW_CHARS // 2)
        preview = text[lo:lo + PREVIEW_CHARS]

        self.logger.warning(
            "Malformed corpus JSON '%s' (attempt %d/%d): %s | position=%d bytes=%d preview=%r",
            self.path,
            attempt,
            self.retries,
            e,
            pos,
            len(raw),
            preview,
        )
