# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-06
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from chat.OpenAIChat import OpenAIChat
from config.Config import Config

from corpus.SwapiCorpusLoader import SwapiCorpusLoader
from corpus.SwapiTextProjector import SwapiTextProjector
from embedding.SwapiEmbedder import SwapiEmbedder
from search.HybridSearcher import HybridSearcher
from services.ProgressRegistry import ProgressRegistry
from services.SwapiChatService import SwapiChatService
from services.SwapiHealthService import SwapiHealthService
from services.SwapiIngestService import SwapiIngestService
from services.SwapiQueryService import SwapiQueryService
from tools.SwapiTools import SwapiTools
from utility.logging_utils import get_class_logger
from vectorstore.ChromaSwapiVectorIndex import ChromaSwapiVectorIndex


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Singleton instances are provided via FastAPI dependencies.
    """

    def __init__(self, cfg: Config | None = None) -> None:
        self.logger = get_class_logger(self.__class__)

        # Configuration
        self.cfg = cfg or Config.from_env()
        self.logger.info("AppContainer starting (%s)", self.cfg.summary())

        # Core infrastructure
        self.embedder = SwapiEmbedder(cfg=self.cfg)
        self.store = ChromaSwapiVectorIndex(cfg=self.cfg)

        # Entity corpus (database.json)
        self.corpus_loader = SwapiCorpusLoader(self.cfg.corpus_path)
        self.projector = SwapiTextProjector()

        # Progress streams for /progress/{session_id}
        self.progress_registry = ProgressRegistry()

        # Return a singleton SwapiIngestService instance
        self.ingest_service = SwapiIngestService(
            corpus_loader=self.corpus_loader,
            projector=self.projector,
            embedder=self.embedder,
            store=self.store,
            index_name=self.cfg.collection_name,
        )

        # Return a singleton SwapiQueryService instance
        self.searcher = HybridSearcher(
            store=self.store,
            embedder=self.embedder,
            index_name=self.cfg.collection_name,
        )
        self.query_service = SwapiQueryService(searcher=self.searcher)

        # Return a singleton SwapiChatService instance
        self.openai_chat = OpenAIChat(cfg=self.cfg)
        self.tools = SwapiTools(corpus_loader=self.corpus_loader)
        self.chat_service = SwapiChatService(
            query_service=self.query_service,
            chat_client=self.openai_chat,
            tools=self.tools,
        )

        # Return a singleton SwapiHealthService instance
        self.health_service = SwapiHealthService(
            cfg=self.cfg,
            store=self.store,
            corpus_loader=self.corpus_loader,
            ingest_service=self.ingest_service,
        )

    def close(self) -> None:
        self.progress_registry.close_all()
        self.logger.info("AppContainer closed")
