"""
main.py — Chunk Splitter Service Entrypoint
==============================================
Runs the FastAPI service that splits files into fixed-size chunks
over restartable, splittable ranges of chunk indices.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from chunk_splitter.api.routes import get_runner, router
from chunk_splitter.config import settings

# ── Logging Configuration ─────────────────────────────────
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("chunk-splitter")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Chunk splitter starting on %s:%d", settings.HOST, settings.PORT)
    logger.info("Data dir:    %s", settings.DATA_DIR)
    logger.info("Chunk size:  %d bytes", settings.CHUNK_SIZE)
    logger.info("Workers:     %d", settings.MAX_WORKERS)
    # Invalid chunk size stops startup
    get_runner()
    yield
    logger.info("Chunk splitter shutting down")


# ── FastAPI Application ───────────────────────────────────
app = FastAPI(
    title="Chunk Splitter API",
    description=(
        "Splits files into fixed-size chunks for streaming consumers.\n\n"
        "**Plan:** file → initial restriction → split into pieces\n\n"
        "**Chunks:** restriction → claim → read → emit (checkpointable)"
    ),
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(router)


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
