# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass
from dotenv import load_dotenv, find_dotenv

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=False)


@dataclass(frozen=True)
class Config:
    # OpenAI (embeddings + chat)
    openai_api_key: str
    openai_base_url: str = ""
    openai_embed_model: str = "text-embedding-3-small"
    openai_chat_model: str = "gpt-4o-mini"

    # Chroma vector database
    chroma_path: str = "./chroma"
    chroma_host: str = ""
    chroma_port: int = 8000
    chroma_api_key: str = ""
    chroma_tenant: str = ""
    chroma_database: str = ""
    collection_name: str = "swapi_data"

    # Entity corpus
    corpus_path: str = "./data/database.json"

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        "openai_api_key": "OPENAI_API_KEY",
        "openai_base_url": "OPENAI_BASE_URL",
        "openai_embed_model": "OPENAI_EMBED_MODEL",
        "openai_chat_model": "OPENAI_CHAT_MODEL",

        "chroma_path": "CHROMA_PATH",
        "chroma_host": "CHROMA_HOST",
        "chroma_port": "CHROMA_PORT",
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",
        "collection_name": "SWAPI_COLLECTION",

        "corpus_path": "SWAPI_CORPUS_PATH",
    }

    # Fields that must be non-empty; everything else has a usable default
    REQUIRED_FIELDS = ("openai_api_key",)

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables, keeping defaults for unset ones."""
        kwargs = {}
        for field_name, env_name in Config.ENV_VARS.items():
            raw = os.getenv(env_name)
            if raw is None or raw.strip() == "":
                continue
            kwargs[field_name] = raw.strip()

        if "chroma_port" in kwargs:
            try:
                kwargs["chroma_port"] = int(kwargs["chroma_port"])
            except ValueError as e:
                raise ValueError(
                    f"Env var {Config.ENV_VARS['chroma_port']} must be an int, got {kwargs['chroma_port']!r}"
                ) from e

        kwargs.setdefault("openai_api_key", "")
        return Config(**kwargs)

    def __post_init__(self):
        """Fail fast if any required config is missing."""
        missing_fields = [f for f in self.REQUIRED_FIELDS if not getattr(self, f)]

        if missing_fields:
            missing_env_vars = [self.ENV_VARS[f] for f in missing_fields]
            raise ValueError(f"Missing required environment variables: {missing_env_vars}")

    @property
    def chroma_mode(self) -> str:
        if self.chroma_api_key:
            return "cloud"
        if self.chroma_host:
            return "http"
        return "local"

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "openai_base_url": self.openai_base_url or "https://api.openai.com/v1",
            "openai_embed_model": self.openai_embed_model,
            "openai_chat_model": self.openai_chat_model,
            "chroma_mode": self.chroma_mode,
            "chroma_path": self.chroma_path,
            "chroma_host": self.chroma_host,
            "chroma_tenant": self.chroma_tenant,
            "chroma_database": self.chroma_database,
            "collection_name": self.collection_name,
            "corpus_path": self.corpus_path,
        }
