# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-09
# Updated: 2026-02-02
# Description: settings.py
# -----------------------------------------------------------------------------
import os
from typing import Any, Dict


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


# -----------------------------------------------------------------------------
# Hybrid search
# -----------------------------------------------------------------------------
SEARCH_DEFAULTS: Dict[str, Any] = {
    "keyword_weight": _env_float("SWAPI_KEYWORD_WEIGHT", 0.7),
    "vector_weight": _env_float("SWAPI_VECTOR_WEIGHT", 0.3),
    "both_paths_bonus": _env_float("SWAPI_BOTH_PATHS_BONUS", 0.2),
    # attribute queries widen the candidate pool to max(limit * multiplier, min_pool)
    "attribute_pool_multiplier": _env_int("SWAPI_ATTRIBUTE_POOL_MULTIPLIER", 3),
    "attribute_min_pool": _env_int("SWAPI_ATTRIBUTE_MIN_POOL", 15),
    "scan_page_size": _env_int("SWAPI_SCAN_PAGE_SIZE", 500),
}


# -----------------------------------------------------------------------------
# Ingestion
# -----------------------------------------------------------------------------
INGEST_THROTTLE_SECONDS = _env_float("SWAPI_INGEST_THROTTLE_SECONDS", 0.1)
CORPUS_READ_RETRIES = _env_int("SWAPI_CORPUS_READ_RETRIES", 3)
CORPUS_RETRY_BACKOFF_SECONDS = _env_float("SWAPI_CORPUS_RETRY_BACKOFF_SECONDS", 0.5)

# Kick off a background rebuild when /query finds no index
AUTO_INGEST_ON_MISSING_INDEX = _env_bool("SWAPI_AUTO_INGEST", True)

# Finished progress streams nobody attached to are dropped after this long
PROGRESS_DETACHED_TTL_SECONDS = _env_float("SWAPI_PROGRESS_DETACHED_TTL_SECONDS", 300.0)


# -----------------------------------------------------------------------------
# Query / chat defaults
# -----------------------------------------------------------------------------
QUERY_DEFAULT_LIMIT = _env_int("SWAPI_DEFAULT_LIMIT", 5)
QUERY_MAX_LIMIT = _env_int("SWAPI_MAX_LIMIT", 50)

CHAT_DEFAULTS: Dict[str, Any] = {
    "temperature": _env_float("SWAPI_DEFAULT_TEMPERATURE", 0.0),
    "max_tokens": _env_int("SWAPI_DEFAULT_MAX_TOKENS", 700),
}
MAX_CONTEXT_CHARS = _env_int("SWAPI_MAX_CONTEXT_CHARS", 12000)
MAX_TOOL_ROUNDS = _env_int("SWAPI_MAX_TOOL_ROUNDS", 3)


# -----------------------------------------------------------------------------
# Sanity checks
# -----------------------------------------------------------------------------
if QUERY_DEFAULT_LIMIT < 1 or QUERY_MAX_LIMIT < QUERY_DEFAULT_LIMIT:
    raise RuntimeError(
        f"Invalid query limits: default={QUERY_DEFAULT_LIMIT} max={QUERY_MAX_LIMIT}"
    )

if CORPUS_READ_RETRIES < 1:
    raise RuntimeError("SWAPI_CORPUS_READ_RETRIES must be >= 1")
