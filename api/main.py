# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-06
# Description: main.py
# -----------------------------------------------------------------------------
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.dependencies import container_started, get_app_container
from api.routers import chat, entities, health, ingest, progress, query

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    # end any open SSE streams so uvicorn can shut down
    if container_started():
        get_app_container().close()
    logger.info("SWAPI RAG API stopped")


app = FastAPI(title="SWAPI RAG API", lifespan=lifespan)
app.include_router(health.router)
app.include_router(query.router)
app.include_router(chat.router)
app.include_router(ingest.router)
app.include_router(progress.router)
app.include_router(entities.router)
