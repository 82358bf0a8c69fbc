"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from petfeed_recommender import __version__
from petfeed_recommender.api.v1.router import api_router
from petfeed_recommender.config import Settings, get_settings
from petfeed_recommender.infrastructure.database.connection import dispose_engine
from petfeed_recommender.middleware.timing import TimingMiddleware
from petfeed_recommender.services.embedding_cache import EmbeddingCache


def configure_logging(settings: Settings) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(get_settings())

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    settings = get_settings()
    logger.info(
        "Starting PetFeed Recommender Service",
        app_env=settings.app_env,
        debug=settings.debug,
        cache_ttl_seconds=settings.embedding_cache_ttl_seconds,
    )

    if settings.preload_embedding_model:
        # Pre-warm so the first request doesn't pay the model load
        from petfeed_recommender.services.query_embedder import get_embedding_model

        logger.info("Pre-warming embedding model...")
        try:
            await asyncio.to_thread(get_embedding_model, settings.embedding_model)
            logger.info("Embedding model ready")
        except Exception as e:
            logger.warning("Embedding model pre-warm failed", error=str(e))

    yield

    await dispose_engine()
    logger.info("Shutting down PetFeed Recommender Service")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="PetFeed Recommender API",
        description="Embedding-similarity recommendations for adoptable pets and articles",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.embedding_cache = EmbeddingCache(
        ttl_seconds=settings.embedding_cache_ttl_seconds
    )

    app.add_middleware(TimingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


def run() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "petfeed_recommender.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.api_workers,
    )


if __name__ == "__main__":
    run()
