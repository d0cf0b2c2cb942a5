# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: errors.py
# -----------------------------------------------------------------------------


class SwapiRagError(Exception):
    """Base class for errors raised by the SWAPI RAG pipeline."""


class CorpusLoadError(SwapiRagError):
    """The entity corpus file is missing or could not be parsed after retries."""


class EmbeddingError(SwapiRagError):
    """The embedding provider failed (rate limit, connection, bad response)."""


class EmbeddingAuthError(EmbeddingError):
    """The embedding provider rejected our credentials. Not retryable."""


class IndexNotReadyError(SwapiRagError):
    """The vector index does not exist yet or the backend is unreachable."""


class IngestInProgressError(SwapiRagError):
    """A rebuild was requested while another one is still running."""


class ChatAuthError(SwapiRagError):
    """The chat-completion provider rejected our credentials. Not retryable."""
