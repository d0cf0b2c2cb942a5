# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-06
# Description: dependencies.py
# -----------------------------------------------------------------------------
from functools import lru_cache

from api.AppContainer import AppContainer
from corpus.SwapiCorpusLoader import SwapiCorpusLoader
from services.ProgressRegistry import ProgressRegistry
from services.SwapiChatService import SwapiChatService
from services.SwapiHealthService import SwapiHealthService
from services.SwapiIngestService import SwapiIngestService
from services.SwapiQueryService import SwapiQueryService


@lru_cache
def get_app_container() -> AppContainer:
    # built on first request so importing the app needs no credentials
    return AppContainer()


def container_started() -> bool:
    return get_app_container.cache_info().currsize > 0


def get_health_service() -> SwapiHealthService:
    # use the singleton service from the container
    return get_app_container().health_service

def get_query_service() -> SwapiQueryService:
    # use the singleton service from the container
    return get_app_container().query_service

def get_ingest_service() -> SwapiIngestService:
    return get_app_container().ingest_service

def get_chat_service() -> SwapiChatService:
    return get_app_container().chat_service

def get_progress_registry() -> ProgressRegistry:
    return get_app_container().progress_registry

def get_corpus_loader() -> SwapiCorpusLoader:
    # already a singleton in the container; the corpus itself is cached by the loader
    return get_app_container().corpus_loader
