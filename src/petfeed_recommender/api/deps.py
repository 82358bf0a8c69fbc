"""FastAPI dependencies wiring the pipeline to its collaborators."""

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from petfeed_recommender.config import Settings, get_settings
from petfeed_recommender.exceptions import AuthenticationError, UpstreamLoadError
from petfeed_recommender.infrastructure.database.connection import get_session_factory
from petfeed_recommender.services.auth import PostgresTokenVerifier, TokenVerifier
from petfeed_recommender.services.candidate_loader import (
    CandidateLoader,
    PostgresCandidateLoader,
)
from petfeed_recommender.services.embedding_cache import EmbeddingCache
from petfeed_recommender.services.pipeline import RecommendationPipeline
from petfeed_recommender.services.preferences import (
    PostgresPreferenceStore,
    PreferenceStore,
)
from petfeed_recommender.services.query_embedder import (
    QueryEmbedder,
    SentenceTransformerEmbedder,
)

bearer_scheme = HTTPBearer(auto_error=False)


def get_embedding_cache(request: Request) -> EmbeddingCache:
    """The process-wide cache owned by the application."""
    return request.app.state.embedding_cache


def get_candidate_loader(settings: Settings = Depends(get_settings)) -> CandidateLoader:
    return PostgresCandidateLoader(get_session_factory(), schema=settings.store_schema)


def get_query_embedder(settings: Settings = Depends(get_settings)) -> QueryEmbedder:
    return SentenceTransformerEmbedder(model_name=settings.embedding_model)


def get_preference_store(settings: Settings = Depends(get_settings)) -> PreferenceStore:
    return PostgresPreferenceStore(get_session_factory(), schema=settings.store_schema)


def get_token_verifier(settings: Settings = Depends(get_settings)) -> TokenVerifier:
    return PostgresTokenVerifier(get_session_factory(), schema=settings.store_schema)


def get_pipeline(
    cache: EmbeddingCache = Depends(get_embedding_cache),
    loader: CandidateLoader = Depends(get_candidate_loader),
    embedder: QueryEmbedder = Depends(get_query_embedder),
    settings: Settings = Depends(get_settings),
) -> RecommendationPipeline:
    return RecommendationPipeline(
        cache, loader, embedder, top_k=settings.recommendation_limit
    )


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> str:
    """Resolve the caller from an ``Authorization: Bearer`` header."""
    if credentials is None or not credentials.credentials.strip():
        raise HTTPException(
            status_code=401,
            detail="Missing Bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await verifier.verify(credentials.credentials.strip())
    except (AuthenticationError, UpstreamLoadError):
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
