"""Health check endpoints."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from petfeed_recommender import __version__
from petfeed_recommender.api.deps import get_embedding_cache
from petfeed_recommender.config import Settings, get_settings
from petfeed_recommender.services.embedding_cache import EmbeddingCache

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str
    timestamp: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    ready: bool
    embedding_cache: dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns the service status and version information.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(
    cache: EmbeddingCache = Depends(get_embedding_cache),
) -> ReadinessResponse:
    """Readiness check, reporting the embedding cache state."""
    return ReadinessResponse(ready=True, embedding_cache=cache.stats())


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Returns 200 while the process is serving requests."""
    return {"status": "alive"}
