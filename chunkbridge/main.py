"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, uvicorn, chunkbridge.api, chunkbridge.observability, chunkbridge.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chunkbridge.api import api_router
from chunkbridge.api.deps.dependencies import get_service_cache
from chunkbridge.configs import get_settings
from chunkbridge.observability.logger import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging and pre-warms the service cache. A vector index that
    fails to initialize leaves ingestion answering 503 instead of aborting
    startup.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    cache = get_service_cache()
    cache.initialize()
    if cache.vector_index is None:
        logger.warning("Vector index not initialized; ingestion will return 503")
    else:
        logger.info("Service cache pre-warmed")

    yield

    cache.clear()
    logger.info("Application shutdown: service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="chunkbridge ingestion API",
        description="Chunk documents and write each chunk to a vector index and a relational store",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chunkbridge.main:app",
        host="localhost",
        port=8082,
        reload=True,
    )
